#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

"""Company car benefit in kind.

See also:
- https://www.gov.uk/tax-company-benefits/tax-on-company-cars
- https://www.gov.uk/government/publications/rates-and-allowances-company-car-tax-and-fuel-benefit-charge
"""


import math
import typing

from decimal import Decimal
from enum import Enum

from paye.precision import Number, context, dround, to_decimal
from paye.taxyear import TaxYearData


class FuelType(Enum):
    PETROL = 'petrol'
    DIESEL = 'diesel'
    ELECTRIC = 'electric'
    HYBRID_ELECTRIC = 'hybrid-electric'
    HYBRID_DIESEL = 'hybrid-diesel'


max_percentage = 37
diesel_supplement = 4
max_capital_contribution = 5000


# (minimum electric range in miles, percentage) for 1-50g/km hybrids
_hybrid_percentages = [
    (130,  2),
    ( 70,  5),
    ( 40,  8),
    ( 30, 12),
    (  0, 14),
]


def benefit_percentage(fuel_type:FuelType|str, co2:Number=0, electric_range:Number=0,
                       registered_after_april_2020:bool=True,
                       rde2_compliant:bool|None=None,
                       electric_percentage:Number=2) -> Decimal:
    fuel_type = FuelType(fuel_type)

    if fuel_type is FuelType.ELECTRIC:
        return to_decimal(electric_percentage)

    if fuel_type in (FuelType.HYBRID_ELECTRIC, FuelType.HYBRID_DIESEL):
        miles = max(to_decimal(electric_range), Decimal(0))
        for minimum, percentage in _hybrid_percentages:
            if miles >= minimum:
                return Decimal(percentage)
        raise AssertionError(miles)  # pragma: no cover

    emissions = to_decimal(co2)
    if emissions <= 0 and registered_after_april_2020:
        percentage = 2
    elif emissions <= 50:
        percentage = 15
    else:
        # 16% at 51-54g/km, plus 1% for every further 5g/km
        percentage = 16 + math.floor((emissions - 51) / 5)

    if rde2_compliant is None:
        rde2_compliant = registered_after_april_2020
    if fuel_type is FuelType.DIESEL and not rde2_compliant:
        percentage += diesel_supplement

    return Decimal(min(percentage, max_percentage))


class CarBenefit(typing.NamedTuple):
    percentage: Decimal
    list_price: Decimal
    capital_contribution: Decimal
    car_benefit: Decimal
    fuel_benefit: Decimal
    total_benefit: Decimal
    tax_payable: Decimal
    monthly_tax_cost: Decimal


def car_benefit(list_price:Number, year_data:TaxYearData,
                fuel_type:FuelType|str=FuelType.PETROL,
                co2:Number=0,
                electric_range:Number=0,
                registered_after_april_2020:bool=True,
                rde2_compliant:bool|None=None,
                capital_contribution:Number=0,
                employer_provides_fuel:bool=False,
                tax_rate:Number=20) -> CarBenefit:
    """Annual taxable benefit of a company car, and the tax on it at the given marginal rate (percent)."""

    percentage = benefit_percentage(
        fuel_type, co2, electric_range,
        registered_after_april_2020=registered_after_april_2020,
        rde2_compliant=rde2_compliant,
        electric_percentage=year_data.electric_car_percentage,
    )

    price = max(to_decimal(list_price), Decimal(0))
    contribution = min(max(to_decimal(capital_contribution), Decimal(0)), Decimal(max_capital_contribution), price)

    benefit = context.multiply(price - contribution, percentage) / 100

    if employer_provides_fuel:
        fuel_benefit = context.multiply(year_data.fuel_benefit_charge, percentage) / 100
    else:
        fuel_benefit = Decimal(0)

    total = benefit + fuel_benefit
    tax = context.multiply(total, to_decimal(tax_rate)) / 100

    return CarBenefit(
        percentage=percentage,
        list_price=dround(price),
        capital_contribution=dround(contribution),
        car_benefit=dround(benefit),
        fuel_benefit=dround(fuel_benefit),
        total_benefit=dround(total),
        tax_payable=dround(tax),
        monthly_tax_cost=dround(tax / 12),
    )
