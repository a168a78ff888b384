#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import asyncio
import copy

import pytest

from decimal import Decimal

import tax.uk

from paye.calculator import *
from paye.taxyear import BuiltinTaxYears, UnknownTaxYear


tax_year = '2024-25'


# salary, tax_code, income_tax, personal_allowance
annual_test_cases = [
    (0,       '1257L',      0, 12570),
    (12570,   '1257L',      0, 12570),
    (30000,   '1257L',   3486, 12570),
    (50000,   '1257L',   7486, 12570),
    (50000,   '',        7486, 12570),
    (50000,   'HELLO',   7486, 12570),
    (50000,   'BR',     10000,     0),
    (50000,   'D0',     20000,     0),
    (50000,   'D1',     22500,     0),
    (50000,   '0T',    12460,      0),
    (120000,  '1257L',  39432,  2570),
    (50000,   'K475',  14360, -4750),
    (50000,   '1100L1', 8060, 11000),
]


@pytest.mark.parametrize("salary,tax_code,income_tax,personal_allowance", annual_test_cases)
def test_annual(calculator, salary:int, tax_code:str, income_tax:int, personal_allowance:int) -> None:
    result = calculator.calculate(salary, tax_code, tax_year=tax_year)
    assert result.personal_allowance == personal_allowance
    assert result.annual_summary.total_income_tax == pytest.approx(income_tax, abs=1)
    assert result.income_tax_bands.total_tax == pytest.approx(income_tax, abs=1e-2)
    assert len(result.monthly_breakdown) == 12
    assert [m.period for m in result.monthly_breakdown] == list(range(1, 13))


def test_summary(calculator) -> None:
    result = calculator.calculate(50000, '1257L', tax_year=tax_year)
    summary = result.annual_summary
    assert summary.gross == 50000
    assert float(summary.total_ni) == pytest.approx((50000/12 - 1048)*0.08*12, abs=1)
    assert summary.net_annual == summary.gross - summary.total_income_tax - summary.total_ni
    assert summary.total_income_tax == sum(m.income_tax for m in result.monthly_breakdown)
    for m in result.monthly_breakdown:
        assert m.gross == Decimal('4166.67')
        assert m.net_pay == pytest.approx(m.gross - m.income_tax - m.national_insurance, abs=Decimal('0.01'))
    assert result.region_name == 'UK'
    assert result.tax_year == tax_year
    assert result.validation


def test_default_code(calculator) -> None:
    assert calculator.calculate(50000, '', tax_year=tax_year) == calculator.calculate(50000, '1257L', tax_year=tax_year)
    assert calculator.calculate(50000, None, tax_year=tax_year) == calculator.calculate(50000, '1257L', tax_year=tax_year)


def test_invalid_code(calculator) -> None:
    result = calculator.calculate(50000, 'HELLO', tax_year=tax_year)
    assert not result.validation
    assert result.validation.message == 'Invalid tax code format'
    assert result.tax_code.code == '1257L'


@pytest.mark.parametrize("salary", [-1000, float('nan'), 'abc', None])
def test_invalid_salary(calculator, salary) -> None:
    result = calculator.calculate(salary, '1257L', tax_year=tax_year)
    assert result.annual_summary.gross == 0
    assert result.annual_summary.total_income_tax == 0
    assert result.annual_summary.total_ni == 0
    for m in result.monthly_breakdown:
        assert m.income_tax == 0
        assert m.national_insurance == 0


def test_unknown_tax_year(calculator) -> None:
    with pytest.raises(UnknownTaxYear):
        calculator.calculate(50000, '1257L', tax_year='2030-31')


def test_scotland(calculator) -> None:
    result = calculator.calculate(50000, 'S1257L', tax_year=tax_year)
    assert result.region_name == 'Scotland'
    assert result.income_tax_bands.total_tax == Decimal('9028.31')
    assert [b.name for b in result.income_tax_bands.bands] == [
        'Starter rate', 'Basic rate', 'Intermediate rate', 'Higher rate', 'Advanced rate', 'Top rate',
    ]


def test_wales(calculator) -> None:
    wales = calculator.calculate(50000, 'C1257L', tax_year=tax_year)
    uk = calculator.calculate(50000, '1257L', tax_year=tax_year)
    assert wales.region_name == 'Wales'
    assert wales.annual_summary == uk.annual_summary


def test_flat_rate_bands(calculator) -> None:
    result = calculator.calculate(50000, 'BR', tax_year=tax_year)
    assert len(result.income_tax_bands.bands) == 1
    assert result.income_tax_bands.bands[0].name == 'Flat rate (BR)'
    for m in result.monthly_breakdown:
        assert m.tax_free == 0


def test_no_tax(calculator) -> None:
    result = calculator.calculate(50000, 'NT', tax_year=tax_year)
    assert result.personal_allowance.is_infinite()
    assert result.annual_summary.total_income_tax == 0
    assert result.income_tax_bands.total_tax == 0
    assert result.annual_summary.total_ni > 0
    for m in result.monthly_breakdown:
        assert m.income_tax == 0
        assert m.taxable == 0
        assert m.tax_free == m.gross


@pytest.mark.parametrize("salary", [1000, 15000, 30000, 60000, 200000])
def test_non_cumulative(calculator, salary:int) -> None:
    cumulative = calculator.calculate(salary, '1257L', cumulative=True, tax_year=tax_year)
    non_cumulative = calculator.calculate(salary, '1257L', cumulative=False, tax_year=tax_year)
    assert cumulative.cumulative
    assert not non_cumulative.cumulative
    # Even pay yields (nearly) the same tax on either basis
    assert non_cumulative.annual_summary.total_income_tax == pytest.approx(cumulative.annual_summary.total_income_tax, abs=1)
    assert non_cumulative.annual_summary.total_ni == cumulative.annual_summary.total_ni
    taxes = {m.income_tax for m in non_cumulative.monthly_breakdown}
    assert len(taxes) == 1


@pytest.mark.parametrize("tax_code", ['1257LW1', '1257LM1', '1257LX'])
def test_non_cumulative_code(calculator, tax_code:str) -> None:
    result = calculator.calculate(50000, tax_code, cumulative=True, tax_year=tax_year)
    assert not result.cumulative
    assert result.tax_code.is_non_cumulative


def test_current_period(calculator) -> None:
    result = calculator.calculate(30000, '1257L', tax_year=tax_year, current_period='M6')
    reference = calculator.calculate(30000, '1257L', tax_year=tax_year)
    assert result.current_period == Period(PeriodType.MONTH, 6)
    assert result.annual_summary == reference.annual_summary
    month6 = result.monthly_breakdown[5]
    for m in result.monthly_breakdown[6:]:
        assert m.income_tax == month6.income_tax
        assert m.national_insurance == month6.national_insurance
        assert m.net_pay == month6.net_pay
    assert result.monthly_breakdown[:6] == reference.monthly_breakdown[:6]


def test_current_period_week(calculator) -> None:
    result = calculator.calculate(30000, '1257L', tax_year=tax_year, current_period=Period(PeriodType.WEEK, 10))
    assert result.current_period == Period(PeriodType.WEEK, 10)
    month3 = result.monthly_breakdown[2]
    for m in result.monthly_breakdown[3:]:
        assert m.income_tax == month3.income_tax


@pytest.mark.parametrize("period", ['M13', 'W53', 'M0', 'next month', Period(PeriodType.MONTH, 13)])
def test_invalid_current_period(calculator, period) -> None:
    result = calculator.calculate(30000, '1257L', tax_year=tax_year, current_period=period)
    assert result.current_period is None


def _confiscatory_provider() -> BuiltinTaxYears:
    tables = copy.deepcopy(tax.uk.tax_years)
    tables[tax_year]['bands'] = {'UK': [('Confiscatory rate', 100, 0, None)]}
    return BuiltinTaxYears(tables)


def test_k_code_cap() -> None:
    calculator = PayeCalculator(_confiscatory_provider(), memo_size=0)
    result = calculator.calculate(24000, 'K475', tax_year=tax_year)
    assert result.personal_allowance == -4750
    for m in result.monthly_breakdown:
        assert m.income_tax == Decimal('1000.00')
    result = calculator.calculate(24000, '1257L', tax_year=tax_year)
    assert result.monthly_breakdown[0].income_tax == Decimal('952.50')


def test_k_code_allowance_cap(calculator) -> None:
    result = calculator.calculate(6000, 'K475', tax_year=tax_year)
    assert result.personal_allowance == -3000
    assert result.annual_summary.total_income_tax == pytest.approx(1800, abs=1)


def test_memo(calculator) -> None:
    calculator.cache_clear()
    first = calculator.calculate(50000, '1257L', tax_year='2024-25')
    second = calculator.calculate('50,000', ' 1257l ', tax_year='2024/25')
    assert second is first
    info = calculator.cache_info()
    assert info.hits == 1
    assert info.misses == 1
    calculator.calculate(50000, '1257L', cumulative=False, tax_year='2024-25')
    assert calculator.cache_info().misses == 2


def test_memo_bounded(provider) -> None:
    calculator = PayeCalculator(provider, memo_size=4)
    for salary in range(10000, 20000, 1000):
        calculator.calculate(salary, '1257L', tax_year=tax_year)
    assert calculator.cache_info().currsize == 4


def test_calculate_async(calculator) -> None:
    result = asyncio.run(calculator.calculate_async(50000, '1257L', tax_year=tax_year))
    assert result == calculator.calculate(50000, '1257L', tax_year=tax_year)

    async def gather():
        return await asyncio.gather(*(
            calculator.calculate_async(salary, '1257L', tax_year=tax_year)
            for salary in (20000, 40000, 60000)
        ))

    results = asyncio.run(gather())
    assert [r.annual_summary.gross for r in results] == [20000, 40000, 60000]


def test_calculate_async_unknown_tax_year(calculator) -> None:
    with pytest.raises(UnknownTaxYear):
        asyncio.run(calculator.calculate_async(50000, '1257L', tax_year='2030-31'))


def test_weekly_breakdown(calculator) -> None:
    result = calculator.calculate(52000, '1257L', tax_year=tax_year)
    weeks = weekly_breakdown(result)
    assert len(weeks) == 52
    assert [w.period for w in weeks] == list(range(1, 53))
    assert weeks[0].gross == Decimal('1000.00')
    assert weeks[0].income_tax == pytest.approx(result.monthly_breakdown[0].income_tax * 12 / 52, abs=Decimal('0.01'))


@pytest.mark.parametrize("s,period", [
    ('M6',       Period(PeriodType.MONTH, 6)),
    ('m6',       Period(PeriodType.MONTH, 6)),
    ('Month 6',  Period(PeriodType.MONTH, 6)),
    ('6',        Period(PeriodType.MONTH, 6)),
    ('W10',      Period(PeriodType.WEEK, 10)),
    ('Week 52',  Period(PeriodType.WEEK, 52)),
])
def test_period_from_string(s:str, period:Period) -> None:
    assert Period.from_string(s) == period


@pytest.mark.parametrize("s", ['M13', 'W53', 'M0', 'X5', '', 'W'])
def test_period_from_string_invalid(s:str) -> None:
    with pytest.raises(ValueError):
        Period.from_string(s)


@pytest.mark.parametrize("week,month", [
    (1, 1),
    (4, 1),
    (5, 1),
    (6, 2),
    (10, 3),
    (26, 6),
    (52, 12),
])
def test_period_month(week:int, month:int) -> None:
    assert Period(PeriodType.WEEK, week).month() == month


def test_period_str() -> None:
    assert str(Period(PeriodType.MONTH, 6)) == 'M6'
    assert str(Period(PeriodType.WEEK, 10)) == 'W10'
    assert Period.create('week', 52).periods == 52
