#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

"""Reconcile pay and tax from previous employments in the same tax year.

The full allowance accrues up to the current period regardless of gaps in
employment.  Any overpayment is refunded through a cumulative code, while
underpayments above a small tolerance are better left to a Week1/Month1 code.

See also:
- https://www.gov.uk/hmrc-internal-manuals/paye-manual/paye20025
"""


import dataclasses
import re
import typing

from decimal import Decimal

from paye.allowance import k_code_limit
from paye.bands import allocate, flat_band, scale_bands
from paye.calculator import Period, PeriodType
from paye.precision import context, dround, to_decimal
from paye.taxcode import parse
from paye.taxyear import TaxYearData


# Underpayments up to this amount are collected through a cumulative code
underpayment_tolerance = Decimal(20)


@dataclasses.dataclass
class Employment:
    gross_pay: Decimal
    tax_paid: Decimal
    periods: str = ''
    include: bool = True

    def __post_init__(self):
        self.gross_pay = max(to_decimal(self.gross_pay), Decimal(0))
        self.tax_paid = to_decimal(self.tax_paid)

    def period_range(self) -> tuple[Period, Period]|None:
        """Parse periods like M1-M4, W1-W20, or a single M8."""
        mo = re.fullmatch(r'\s*([MW]\d{1,2})\s*(?:-\s*([MW]\d{1,2})\s*)?', self.periods.upper())
        if mo is None:
            return None
        first = Period.from_string(mo.group(1))
        last = Period.from_string(mo.group(2) or mo.group(1))
        if first.type is not last.type or first.number > last.number:
            raise ValueError(f'invalid period range {self.periods!r}')
        return first, last


class Review(typing.NamedTuple):
    period: Period
    total_gross_pay: Decimal
    total_tax_paid: Decimal
    allowance_to_date: Decimal
    expected_tax: Decimal
    difference: Decimal     # positive when overpaid
    cumulative: bool
    recommendation: str


def detect_current_period(employments:typing.Sequence[Employment], default:Period=Period(PeriodType.MONTH, 1)) -> Period:
    """Latest period reached by any employment.

    The first (primary) employment with known periods decides whether pay is
    weekly or monthly; ranges of the other kind are ignored.
    """
    current = None
    for employment in employments:
        if not employment.periods:
            continue
        period_range = employment.period_range()
        if period_range is None:
            continue
        _, last = period_range
        if current is None:
            current = last
        elif last.type is current.type and last.number > current.number:
            current = last
    return default if current is None else current


def allowance_to_date(tax_code:str|None, period:Period) -> Decimal:
    code = parse(tax_code)
    if code.is_no_tax:
        return code.base_allowance
    if code.special_code is not None:
        return Decimal(0)
    return dround(context.divide(context.multiply(code.base_allowance, Decimal(period.number)), Decimal(period.periods)))


def review_employments(employments:typing.Sequence[Employment], tax_code:str|None, period:Period, year_data:TaxYearData) -> Review:
    included = [e for e in employments if e.include]
    total_gross_pay = sum((e.gross_pay for e in included), Decimal(0))
    total_tax_paid = sum((e.tax_paid for e in included), Decimal(0))

    code = parse(tax_code)
    allowance = allowance_to_date(tax_code, period)

    if code.is_no_tax:
        expected_tax = Decimal(0)
    else:
        taxable = max(total_gross_pay - allowance, Decimal(0))
        if code.is_flat_rate:
            assert code.tax_rate is not None
            bands = flat_band(code.tax_rate)
        else:
            bands = scale_bands(year_data.region_bands(code.region).bands, period.number, period.periods)
        expected_tax = allocate(taxable, bands).total_tax
        if code.is_negative_allowance:
            expected_tax = min(expected_tax, context.multiply(total_gross_pay, k_code_limit))

    difference = dround(total_tax_paid - expected_tax)

    if difference > 0:
        cumulative = True
        recommendation = 'Issue a cumulative tax code to refund the overpayment over the remaining pay periods.'
    elif difference == 0:
        cumulative = True
        recommendation = 'Tax is correct. Issue a cumulative tax code.'
    elif -difference <= underpayment_tolerance:
        cumulative = True
        recommendation = f'Use a cumulative tax code, as the underpayment is £{underpayment_tolerance} or less.'
    else:
        cumulative = False
        recommendation = f'Issue a Week 1/Month 1 (non-cumulative) tax code, as the underpayment exceeds £{underpayment_tolerance}.'

    return Review(
        period=period,
        total_gross_pay=dround(total_gross_pay),
        total_tax_paid=dround(total_tax_paid),
        allowance_to_date=allowance,
        expected_tax=dround(expected_tax),
        difference=difference,
        cumulative=cumulative,
        recommendation=recommendation,
    )
