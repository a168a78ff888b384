#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

"""Class 1 employee National Insurance contributions.

NI is assessed on each pay period in isolation, even when income tax is
accounted cumulatively.

See also:
- https://www.gov.uk/national-insurance-rates-letters
- https://www.gov.uk/guidance/rates-and-thresholds-for-employers-2024-to-2025
"""


import logging
import typing

from decimal import Decimal

from paye.bands import Allocation, allocate, band
from paye.precision import Number, context, dround, to_decimal


logger = logging.getLogger('ni')


periods = ('weekly', 'monthly', 'annual')


class Thresholds(typing.NamedTuple):
    weekly: Decimal
    monthly: Decimal
    annual: Decimal


class NIThresholds(typing.NamedTuple):
    primary_threshold: Thresholds
    upper_earnings_limit: Thresholds


class NIRates(typing.NamedTuple):
    main_rate: Decimal = Decimal('0.12')
    higher_rate: Decimal = Decimal('0.02')


def thresholds(weekly:Number, monthly:Number, annual:Number) -> Thresholds:
    return Thresholds(to_decimal(weekly), to_decimal(monthly), to_decimal(annual))


def thresholds_from_annual(primary_threshold:Number, upper_earnings_limit:Number) -> NIThresholds:
    """Derive weekly and monthly thresholds from annual ones."""

    def split(annual:Number) -> Thresholds:
        a = to_decimal(annual)
        return Thresholds(dround(a / 52), dround(a / 12), a)

    return NIThresholds(split(primary_threshold), split(upper_earnings_limit))


DEFAULT_THRESHOLDS = NIThresholds(
    primary_threshold=thresholds(242, 1048, 12570),
    upper_earnings_limit=thresholds(967, 4189, 50270),
)


def check_thresholds(ni_thresholds:NIThresholds, tolerance:Number='0.01') -> list[str]:
    """Sanity check thresholds.

    Negative thresholds are errors; other inconsistencies are returned (and
    logged) as warnings.
    """

    tolerance = to_decimal(tolerance)
    warnings = []

    for name, t in zip(('primary threshold', 'upper earnings limit'), ni_thresholds):
        for period, value in zip(periods, t):
            if value < 0:
                raise ValueError(f'negative {period} {name}: {value}')
        for period, value, factor in (('weekly', t.weekly, 52), ('monthly', t.monthly, 12)):
            if t.annual == 0:
                continue
            deviation = abs(value * factor - t.annual) / t.annual
            if deviation > tolerance:
                warnings.append(f'{period} {name} {value} inconsistent with annual {t.annual}')

    pt, uel = ni_thresholds
    for period, lower, upper in zip(periods, pt, uel):
        if lower >= upper:
            warnings.append(f'{period} primary threshold {lower} not below upper earnings limit {upper}')

    for warning in warnings:
        logger.warning(warning)

    return warnings


def compute_ni(period_gross:Number, ni_thresholds:NIThresholds=DEFAULT_THRESHOLDS, rates:NIRates=NIRates(), period:str='monthly') -> Decimal:
    assert period in periods

    gross = to_decimal(period_gross)
    if gross <= 0 or gross.is_infinite():
        return dround(0)

    pt = getattr(ni_thresholds.primary_threshold, period)
    uel = getattr(ni_thresholds.upper_earnings_limit, period)

    main = max(min(gross, uel) - pt, Decimal(0))
    higher = max(gross - uel, Decimal(0))

    ni = context.multiply(main, to_decimal(rates.main_rate)) + context.multiply(higher, to_decimal(rates.higher_rate))
    return dround(ni)


def ni_bands(annual_salary:Number, ni_thresholds:NIThresholds=DEFAULT_THRESHOLDS, rates:NIRates=NIRates()) -> Allocation:
    """Annual NI breakdown, for display."""

    pt = ni_thresholds.primary_threshold.annual
    uel = ni_thresholds.upper_earnings_limit.annual
    bands = [
        band('Below Primary Threshold', 0, 0, pt),
        band('Main rate', to_decimal(rates.main_rate) * 100, pt, uel),
        band('Higher rate', to_decimal(rates.higher_rate) * 100, uel, None),
    ]
    return allocate(annual_salary, bands)
