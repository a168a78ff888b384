#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import dataclasses
import typing

from decimal import Decimal

from paye.calculator import AnnualSummary, PayeCalculator
from paye.precision import Number, context, dround, to_decimal


@dataclasses.dataclass
class Scenario:
    name: str
    salary: Number
    tax_code: str = ''
    cumulative: bool = True
    pension_percent: Number = 0     # net pay arrangement, i.e., before tax


class Comparison(typing.NamedTuple):
    scenario: Scenario
    summary: AnnualSummary
    pension: Decimal
    net_difference: Decimal     # relative to the first scenario
    tax_difference: Decimal


def compare_scenarios(calculator:PayeCalculator, scenarios:typing.Sequence[Scenario], tax_year:str|None=None) -> list[Comparison]:
    """Annual take home pay of each scenario, compared with the first one."""

    comparisons:list[Comparison] = []
    for scenario in scenarios:
        salary = to_decimal(scenario.salary)
        pension = dround(context.divide(context.multiply(salary, to_decimal(scenario.pension_percent)), Decimal(100)))
        result = calculator.calculate(salary - pension, scenario.tax_code, scenario.cumulative, tax_year)
        summary = result.annual_summary
        if comparisons:
            base = comparisons[0].summary
            net_difference = summary.net_annual - base.net_annual
            tax_difference = summary.total_income_tax - base.total_income_tax
        else:
            net_difference = Decimal('0.00')
            tax_difference = Decimal('0.00')
        comparisons.append(Comparison(scenario, summary, pension, net_difference, tax_difference))
    return comparisons


class SecondaryComparison(typing.NamedTuple):
    primary_tax: Decimal
    secondary_tax: Decimal
    combined_salary: Decimal
    single_source_tax: Decimal      # all income taxed under the primary code
    difference: Decimal             # positive when the two jobs pay more tax

    @property
    def total_tax(self) -> Decimal:
        return self.primary_tax + self.secondary_tax


def compare_secondary(calculator:PayeCalculator, primary_salary:Number, primary_code:str|None, secondary_salary:Number, secondary_code:str|None='BR', tax_year:str|None=None) -> SecondaryComparison:
    """Annual tax on a second job, against the same income from a single source.

    A second job normally has a BR, D0 or D1 code, since the allowance is used
    by the primary employment.
    """

    primary = calculator.calculate(primary_salary, primary_code, True, tax_year).annual_summary
    secondary = calculator.calculate(secondary_salary, secondary_code or 'BR', True, tax_year).annual_summary
    combined_salary = primary.gross + secondary.gross
    single = calculator.calculate(combined_salary, primary_code, True, tax_year).annual_summary

    return SecondaryComparison(
        primary_tax=primary.total_income_tax,
        secondary_tax=secondary.total_income_tax,
        combined_salary=combined_salary,
        single_source_tax=single.total_income_tax,
        difference=primary.total_income_tax + secondary.total_income_tax - single.total_income_tax,
    )
