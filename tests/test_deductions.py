#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import pytest

from decimal import Decimal

from paye.calculator import Period, PeriodType
from paye.deductions import *


tax_year = '2024-25'


@pytest.mark.parametrize("gross,plan,expected", [
    (3000,  None,       0),
    (3000,  'none',     0),
    (2000,  'plan-2',   0),
    (3000,  'plan-1',   82),
    (3000,  'plan-2',   65),
    (3000,  'plan-4',   34),
    (3000,  'postgrad', 75),
])
def test_student_loan_repayment(gross:int, plan:str|None, expected:int) -> None:
    assert student_loan_repayment(gross, plan) == expected


def test_student_loan_repayment_weekly() -> None:
    # (700 - 27295/52) * 9%
    assert student_loan_repayment(700, 'plan-2', periods=52) == 15


def test_student_loan_unknown_plan() -> None:
    with pytest.raises(ValueError):
        student_loan_repayment(3000, 'plan-9')


@pytest.mark.parametrize("scheme,contribution,deduction", [
    (PensionScheme.NET_PAY,          150, 150),
    ('net-pay',                      150, 150),
    (PensionScheme.RELIEF_AT_SOURCE, 150, 120),
    ('relief-at-source',             150, 120),
])
def test_pension_contribution(scheme, contribution:int, deduction:int) -> None:
    assert pension_contribution(3000, 5, scheme) == (contribution, deduction)


def test_pension_contribution_invalid() -> None:
    assert pension_contribution(3000, -5) == (0, 0)
    with pytest.raises(ValueError):
        pension_contribution(3000, 5, 'salary-sacrifice')


def test_period_pay_net_pay(calculator) -> None:
    pay = period_pay(calculator, 3000, '1257L', 'M1', tax_year=tax_year,
                     student_loan_plan='plan-2',
                     pension_percent=5,
                     pension_scheme=PensionScheme.NET_PAY)
    assert pay.period == Period(PeriodType.MONTH, 1)
    assert pay.gross == 3000
    assert pay.pension == 150
    assert pay.taxable_pay == 2850
    assert pay.income_tax == Decimal('360.50')
    assert pay.national_insurance == Decimal('156.16')
    assert pay.student_loan == 65
    assert pay.net_pay == Decimal('2268.34')


def test_period_pay_relief_at_source(calculator) -> None:
    pay = period_pay(calculator, 3000, '1257L', 'M1', tax_year=tax_year,
                     pension_percent=5,
                     pension_scheme='relief-at-source')
    assert pay.pension == 150
    assert pay.taxable_pay == 3000
    assert pay.income_tax == Decimal('390.50')
    assert pay.student_loan == 0
    assert pay.net_pay == Decimal('2333.34')


def test_period_pay_weekly(calculator) -> None:
    pay = period_pay(calculator, 600, '1257L', Period(PeriodType.WEEK, 10), tax_year=tax_year)
    assert pay.national_insurance == Decimal('28.64')
    # (600*52 - 12570) * 20% / 52
    assert pay.income_tax == pytest.approx(Decimal('71.65'), abs=Decimal('0.01'))


def test_period_pay_state_pension_age(calculator) -> None:
    pay = period_pay(calculator, 3000, '1257L', 'M1', tax_year=tax_year, over_state_pension_age=True)
    assert pay.national_insurance == 0
    assert pay.net_pay == pay.gross - pay.income_tax


@pytest.mark.parametrize("tax_code", ['1257L', 'C1257L', 'S1257L', ''])
def test_period_pay_scottish(calculator, tax_code:str) -> None:
    pay = period_pay(calculator, 4000, tax_code, 'M1', tax_year=tax_year, scottish=True)
    expected = calculator.calculate(48000, 'S1257L', tax_year=tax_year).annual_summary.total_income_tax / 12
    assert pay.income_tax == pytest.approx(expected, abs=Decimal('0.01'))
    uk = period_pay(calculator, 4000, '1257L', 'M1', tax_year=tax_year)
    assert pay.income_tax > uk.income_tax


def test_period_pay_invalid_period(calculator) -> None:
    with pytest.raises(ValueError):
        period_pay(calculator, 3000, '1257L', 'M13', tax_year=tax_year)
