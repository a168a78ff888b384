#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

"""Check the tax deducted on a payslip for a single pay period."""


import datetime
import logging
import typing

from decimal import Decimal

from paye.allowance import k_code_limit
from paye.calculator import PayeCalculator, Period, PeriodType
from paye.precision import Number, context, dround, to_decimal
from paye.taxcode import parse
from tax.uk import TaxYear


logger = logging.getLogger('verification')


class PeriodBand(typing.NamedTuple):
    name: str
    rate: Decimal
    amount: Decimal
    tax: Decimal


class Verification(typing.NamedTuple):
    period: Period
    cumulative: bool
    annualized: Decimal
    tax_free: Decimal
    taxable: Decimal
    expected_tax: Decimal
    is_k_code: bool
    k_code_capped: bool
    bands: tuple[PeriodBand, ...]


def tax_period(date:datetime.date, period_type:PeriodType|str=PeriodType.MONTH) -> Period:
    """Pay period of a payment date."""

    tax_year = TaxYear.from_date(date)
    period_type = PeriodType(period_type)
    if period_type is PeriodType.MONTH:
        return Period(period_type, tax_year.tax_month(date))
    else:
        return Period(period_type, tax_year.tax_week(date))


def verify_period(calculator:PayeCalculator, earned:Number, tax_code:str|None, period:Period|str, cumulative:bool=True, tax_year:str|None=None) -> Verification:
    """Expected tax for a pay period.

    When cumulative, the earned amount is the pay to date; otherwise it's the
    pay of the period alone.  Raises ValueError for invalid periods.
    """

    if isinstance(period, str):
        period = Period.from_string(period)
    else:
        period = Period.create(*period)

    # Week1/Month1 codes are always assessed on the period's pay alone
    if parse(tax_code).is_non_cumulative:
        cumulative = False

    periods = period.periods
    amount = max(to_decimal(earned), Decimal(0))

    if cumulative:
        annualized = context.divide(context.multiply(amount, Decimal(periods)), Decimal(period.number))
        factor = context.divide(Decimal(period.number), Decimal(periods))
    else:
        annualized = context.multiply(amount, Decimal(periods))
        factor = context.divide(Decimal(1), Decimal(periods))

    result = calculator.calculate(annualized, tax_code, cumulative, tax_year)
    code = result.tax_code

    annual_tax = result.income_tax_bands.total_tax
    allowance = result.personal_allowance

    if code.is_no_tax:
        tax_free = amount
        taxable = Decimal(0)
    elif code.is_negative_allowance:
        tax_free = Decimal(0)
        taxable = amount + context.multiply(-allowance, factor)
    else:
        tax_free = context.multiply(allowance, factor)
        taxable = max(amount - tax_free, Decimal(0))

    expected_tax = context.multiply(annual_tax, factor)

    k_code_capped = False
    if code.is_negative_allowance:
        cap = context.multiply(amount, k_code_limit)
        if expected_tax > cap:
            logger.debug('K code tax %s exceeds overriding limit %s', expected_tax, cap)
            expected_tax = cap
            k_code_capped = True

    bands = tuple(
        PeriodBand(b.name, b.rate, dround(context.multiply(b.amount, factor)), dround(context.multiply(b.tax, factor)))
        for b in result.income_tax_bands.bands
        if b.amount > 0
    )

    return Verification(
        period=period,
        cumulative=result.cumulative,
        annualized=dround(annualized),
        tax_free=dround(tax_free),
        taxable=dround(taxable),
        expected_tax=dround(expected_tax),
        is_k_code=code.is_negative_allowance,
        k_code_capped=k_code_capped,
        bands=bands,
    )
