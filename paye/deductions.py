#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

"""Take home pay for a pay period, after pension and student loan deductions."""


import typing

from decimal import Decimal, ROUND_FLOOR
from enum import Enum

from paye.calculator import PayeCalculator, Period, PeriodType
from paye.ni import compute_ni
from paye.precision import Number, context, dround, to_decimal
from paye.taxcode import default_code, normalize
from tax.uk import relief_at_source_rate, student_loan_plans


class PensionScheme(Enum):
    RELIEF_AT_SOURCE = 'relief-at-source'
    NET_PAY = 'net-pay'


def student_loan_repayment(period_gross:Number, plan:str|None, periods:int=12) -> Decimal:
    """Student loan repayment for a single pay period."""

    if not plan or plan == 'none':
        return dround(0)
    try:
        threshold, rate = student_loan_plans[plan]
    except KeyError:
        raise ValueError(f'unknown student loan plan {plan!r}') from None
    gross = to_decimal(period_gross)
    period_threshold = context.divide(Decimal(threshold), Decimal(periods))
    if gross <= period_threshold:
        return dround(0)
    # Repayments are rounded down to whole pounds
    repayment = context.multiply(gross - period_threshold, to_decimal(rate))
    return dround(repayment.to_integral_value(rounding=ROUND_FLOOR))


def pension_contribution(period_gross:Number, percent:Number, scheme:PensionScheme|str=PensionScheme.RELIEF_AT_SOURCE) -> tuple[Decimal, Decimal]:
    """Return (gross contribution, amount deducted from pay).

    Net pay arrangements are deducted before tax, in full.  Relief at source
    contributions are deducted after tax, net of basic rate relief.
    """

    scheme = PensionScheme(scheme)
    contribution = context.divide(context.multiply(to_decimal(period_gross), to_decimal(percent)), Decimal(100))
    contribution = max(contribution, Decimal(0))
    if scheme is PensionScheme.NET_PAY:
        return dround(contribution), dround(contribution)
    return dround(contribution), dround(context.multiply(contribution, 1 - to_decimal(relief_at_source_rate)))


class PeriodPay(typing.NamedTuple):
    period: Period
    gross: Decimal
    pension: Decimal
    taxable_pay: Decimal
    income_tax: Decimal
    national_insurance: Decimal
    student_loan: Decimal
    net_pay: Decimal


def period_pay(calculator:PayeCalculator, gross:Number, tax_code:str|None, period:Period|str, cumulative:bool=True, tax_year:str|None=None,
               scottish:bool=False,
               student_loan_plan:str|None=None,
               pension_percent:Number=0,
               pension_scheme:PensionScheme|str=PensionScheme.RELIEF_AT_SOURCE,
               over_state_pension_age:bool=False) -> PeriodPay:
    """Payslip for a single period's gross pay.

    Tax is the period's share of the annualized figure; NI is assessed on the
    period alone.
    """

    if isinstance(period, str):
        period = Period.from_string(period)
    else:
        period = Period.create(*period)
    periods = period.periods

    tax_code = normalize(tax_code)
    if scottish and not tax_code.startswith('S'):
        tax_code = 'S' + (tax_code.removeprefix('C') or default_code)

    gross = max(to_decimal(gross), Decimal(0))
    scheme = PensionScheme(pension_scheme)
    pension, pension_deduction = pension_contribution(gross, pension_percent, scheme)
    taxable_pay = gross - pension if scheme is PensionScheme.NET_PAY else gross

    result = calculator.calculate(context.multiply(taxable_pay, Decimal(periods)), tax_code, cumulative, tax_year)
    factor = context.divide(Decimal(1), Decimal(periods))
    income_tax = dround(context.multiply(result.annual_summary.total_income_tax, factor))
    # NI is due on pay before pension contributions
    if over_state_pension_age:
        ni = dround(0)
    else:
        year_data = calculator.provider.get(result.tax_year)
        ni = compute_ni(gross, year_data.ni_thresholds, year_data.ni_rates, 'monthly' if period.type is PeriodType.MONTH else 'weekly')

    student_loan = student_loan_repayment(gross, student_loan_plan, periods)

    net_pay = gross - income_tax - ni - student_loan - pension_deduction

    return PeriodPay(
        period=period,
        gross=dround(gross),
        pension=pension,
        taxable_pay=dround(taxable_pay),
        income_tax=income_tax,
        national_insurance=ni,
        student_loan=student_loan,
        net_pay=dround(net_pay),
    )
