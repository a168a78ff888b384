#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

"""PAYE income tax and NI calculation over the months of a tax year.

Income tax may be accounted cumulatively (year-to-date pay against
year-to-date allowance and band limits) or non-cumulatively (Week1/Month1
basis, each period on its own).  NI is always assessed per period.

See also:
- https://www.gov.uk/hmrc-internal-manuals/paye-manual/paye11005
- https://www.gov.uk/guidance/tax-codes-and-the-emergency-code
"""


import asyncio
import functools
import logging
import math
import re
import typing

from decimal import Decimal
from enum import Enum

import environ

from paye.allowance import compute_allowance, k_code_limit, prorate
from paye.bands import Allocation, allocate, flat_band, scale_bands
from paye.ni import compute_ni, ni_bands
from paye.precision import Number, context, dround, to_decimal
from paye.taxcode import TaxCode, default_code, normalize, parse
from paye.taxyear import BuiltinTaxYears, Provider, TaxYearData, normalize_tax_year
from paye.validation import Validation, validate_tax_code
from tax.uk import months_per_year, weeks_per_year


logger = logging.getLogger('calculator')


class PeriodType(Enum):
    MONTH = 'month'
    WEEK = 'week'


class Period(typing.NamedTuple):
    type: PeriodType
    number: int

    def __str__(self) -> str:
        return ('M' if self.type is PeriodType.MONTH else 'W') + str(self.number)

    @property
    def periods(self) -> int:
        return months_per_year if self.type is PeriodType.MONTH else weeks_per_year

    def month(self) -> int:
        """Tax month (1-12) containing this period."""
        if self.type is PeriodType.MONTH:
            return self.number
        return min(math.floor((self.number - 1) / (weeks_per_year / months_per_year)) + 1, months_per_year)

    @classmethod
    def create(cls, type:PeriodType|str, number:int) -> 'Period':
        type = PeriodType(type)
        period = cls(type, number)
        if not isinstance(number, int) or not 1 <= number <= period.periods:
            raise ValueError(f'{type.value} {number} out of range 1-{period.periods}')
        return period

    @classmethod
    def from_string(cls, s:str) -> 'Period':
        """Parse M6, W10, Month 6, Week 10, or a bare month number."""
        mo = re.fullmatch(r'\s*(?:(?P<kind>[MW])[A-Z]*\s*)?(?P<number>\d{1,2})\s*', s.upper())
        if mo is None:
            raise ValueError(f'invalid period {s!r}')
        type = PeriodType.WEEK if mo.group('kind') == 'W' else PeriodType.MONTH
        return cls.create(type, int(mo.group('number')))


class PeriodBreakdown(typing.NamedTuple):
    period: int
    gross: Decimal
    tax_free: Decimal
    taxable: Decimal
    income_tax: Decimal
    national_insurance: Decimal
    net_pay: Decimal


class AnnualSummary(typing.NamedTuple):
    gross: Decimal
    total_income_tax: Decimal
    total_ni: Decimal
    net_annual: Decimal


class TaxCalculation(typing.NamedTuple):
    tax_year: str
    tax_code: TaxCode
    cumulative: bool
    current_period: Period|None
    personal_allowance: Decimal
    region_name: str
    annual_summary: AnnualSummary
    monthly_breakdown: tuple[PeriodBreakdown, ...]
    income_tax_bands: Allocation
    ni_bands: Allocation
    validation: Validation


def _clamp_salary(salary:Number) -> Decimal:
    d = to_decimal(salary)
    if d < 0 or d.is_infinite():
        logger.debug('invalid salary %r, using 0', salary)
        return Decimal(0)
    return d


def _coerce_period(period:Period|str|None) -> Period|None:
    if period is None:
        return None
    try:
        if isinstance(period, Period):
            return Period.create(*period)
        return Period.from_string(period)
    except ValueError:
        logger.debug('ignoring invalid current period %r', period)
        return None


def compute(year_data:TaxYearData, salary:Number, tax_code:str|None='', cumulative:bool=True, current_period:Period|None=None) -> TaxCalculation:
    """Calculate a year of monthly pay, without memoization."""

    gross = _clamp_salary(salary)
    validation = validate_tax_code(tax_code)
    code = parse(tax_code or default_code)
    region_bands = year_data.region_bands(code.region)

    if code.is_flat_rate:
        assert code.special_code is not None and code.tax_rate is not None
        bands = flat_band(code.tax_rate, name=f"Flat rate ({code.special_code.value})")
    else:
        bands = list(region_bands.bands)

    allowance = compute_allowance(gross, code, year_data.taper)

    # Week1/Month1 codes override whatever basis was asked for
    cumulative = cumulative and not code.is_non_cumulative

    logger.debug('%s %s: gross=%s allowance=%s region=%s cumulative=%s',
                 year_data.tax_year, code, gross, allowance, region_bands.name, cumulative)

    monthly_gross = context.divide(gross, Decimal(months_per_year))
    monthly_allowance = prorate(allowance, 1, months_per_year)
    k_cap = dround(context.multiply(monthly_gross, k_code_limit))

    months = []
    for month in range(1, months_per_year + 1):
        periods = month if cumulative else 1

        if code.is_no_tax:
            tax_free = monthly_gross
            taxable = Decimal(0)
            income_tax = dround(0)
        else:
            ytd_gross = context.multiply(monthly_gross, Decimal(periods))
            ytd_allowance = prorate(allowance, periods, months_per_year)
            ytd_taxable = max(ytd_gross - ytd_allowance, Decimal(0))
            ytd_bands = scale_bands(bands, periods, months_per_year)
            ytd_tax = allocate(ytd_taxable, ytd_bands).total_tax
            income_tax = dround(context.divide(ytd_tax, Decimal(periods)))
            if code.is_negative_allowance and income_tax > k_cap:
                logger.debug('month %d: K code tax %s capped to %s', month, income_tax, k_cap)
                income_tax = k_cap
            tax_free = monthly_allowance
            taxable = context.divide(ytd_taxable, Decimal(periods))

        ni = compute_ni(monthly_gross, year_data.ni_thresholds, year_data.ni_rates, 'monthly')
        net_pay = monthly_gross - income_tax - ni

        months.append(PeriodBreakdown(
            period=month,
            gross=dround(monthly_gross),
            tax_free=dround(tax_free),
            taxable=dround(taxable),
            income_tax=income_tax,
            national_insurance=ni,
            net_pay=dround(net_pay),
        ))

    # Totals are taken before freezing, so they always reflect the full year
    total_income_tax = sum((m.income_tax for m in months), Decimal(0))
    total_ni = sum((m.national_insurance for m in months), Decimal(0))
    annual_summary = AnnualSummary(
        gross=dround(gross),
        total_income_tax=dround(total_income_tax),
        total_ni=dround(total_ni),
        net_annual=dround(gross - total_income_tax - total_ni),
    )

    if current_period is not None:
        current = months[current_period.month() - 1]
        for i in range(current.period, months_per_year):
            months[i] = months[i]._replace(
                income_tax=current.income_tax,
                national_insurance=current.national_insurance,
                net_pay=current.net_pay,
            )

    if code.is_no_tax:
        annual_taxable = Decimal(0)
    else:
        annual_taxable = max(gross - allowance, Decimal(0))

    return TaxCalculation(
        tax_year=year_data.tax_year,
        tax_code=code,
        cumulative=cumulative,
        current_period=current_period,
        personal_allowance=allowance,
        region_name=region_bands.name,
        annual_summary=annual_summary,
        monthly_breakdown=tuple(months),
        income_tax_bands=allocate(annual_taxable, bands),
        ni_bands=ni_bands(gross, year_data.ni_thresholds, year_data.ni_rates),
        validation=validation,
    )


class PayeCalculator:
    """Calculator bound to a tax year data provider, with a bounded memo table.

    Results are immutable, so memoized results can be shared between callers.
    """

    def __init__(self, provider:Provider|None=None, memo_size:int|None=None):
        self.provider = BuiltinTaxYears() if provider is None else provider
        if memo_size is None:
            memo_size = environ.memo_size
        self._memo = functools.lru_cache(maxsize=memo_size)(self._calculate)
        self.cache_info = self._memo.cache_info
        self.cache_clear = self._memo.cache_clear

    def _calculate(self, salary:Decimal, tax_code:str, cumulative:bool, tax_year:str, current_period:Period|None) -> TaxCalculation:
        year_data = self.provider.get(tax_year)
        return compute(year_data, salary, tax_code, cumulative, current_period)

    @staticmethod
    def _key(annual_salary:Number, tax_code:str|None, cumulative:bool, tax_year:str|None, current_period:Period|str|None) -> tuple:
        if tax_year is None:
            tax_year = environ.tax_year
        return (
            _clamp_salary(annual_salary),
            normalize(tax_code),
            bool(cumulative),
            normalize_tax_year(tax_year),
            _coerce_period(current_period),
        )

    def calculate(self, annual_salary:Number, tax_code:str|None='', cumulative:bool=True, tax_year:str|None=None, current_period:Period|str|None=None) -> TaxCalculation:
        """Calculate income tax, NI and take home pay for each month of the tax year.

        Bad salary or tax code input degrades to defaults; only an unknown
        tax year raises (UnknownTaxYear).
        """
        return self._memo(*self._key(annual_salary, tax_code, cumulative, tax_year, current_period))

    async def calculate_async(self, annual_salary:Number, tax_code:str|None='', cumulative:bool=True, tax_year:str|None=None, current_period:Period|str|None=None) -> TaxCalculation:
        key = self._key(annual_salary, tax_code, cumulative, tax_year, current_period)
        # Fetching tax year data may block on I/O; the calculation itself does not
        await asyncio.to_thread(self.provider.get, key[3])
        return self._memo(*key)


def weekly_breakdown(result:TaxCalculation) -> list[PeriodBreakdown]:
    """Weekly view of a calculation, each week being 12/52 of its month."""

    factor = context.divide(Decimal(months_per_year), Decimal(weeks_per_year))
    weeks = []
    for week in range(1, weeks_per_year + 1):
        month = result.monthly_breakdown[Period(PeriodType.WEEK, week).month() - 1]
        weeks.append(PeriodBreakdown(
            week,
            *(dround(context.multiply(value, factor)) for value in month[1:]),
        ))
    return weeks
