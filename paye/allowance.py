#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import logging
import typing

from decimal import Decimal, ROUND_FLOOR

from paye.precision import Number, context, to_decimal
from paye.taxcode import TaxCode
from tax.uk import pa_limit


logger = logging.getLogger('allowance')


# https://www.gov.uk/income-tax-rates/income-over-100000
class TaperConfig(typing.NamedTuple):
    threshold: Decimal = Decimal(pa_limit)
    rate: Decimal = Decimal('0.5')


# https://www.gov.uk/hmrc-internal-manuals/paye-manual/paye11090
k_code_limit = Decimal('0.5')


def compute_allowance(gross_annual:Number, code:TaxCode, taper:TaperConfig=TaperConfig()) -> Decimal:
    """Annual personal allowance for the tax code, negative for K codes.

    NT codes return an infinite allowance, which callers must not do
    arithmetic with.
    """

    allowance = code.base_allowance
    if allowance.is_infinite():
        return allowance

    salary = max(to_decimal(gross_annual), Decimal(0))

    # Taper only reduces a positive allowance, and never below zero
    if allowance > 0 and salary > taper.threshold:
        excess = context.multiply(salary - taper.threshold, to_decimal(taper.rate))
        reduction = excess.to_integral_value(rounding=ROUND_FLOOR)
        allowance -= min(allowance, reduction)
        logger.debug('allowance tapered by %s to %s', reduction, allowance)

    if code.is_negative_allowance:
        cap = context.multiply(salary, k_code_limit)
        if -allowance > cap:
            logger.debug('K code addition %s capped to %s', -allowance, cap)
            allowance = -cap

    return allowance


def prorate(annual:Decimal, numerator:int, denominator:int=12) -> Decimal:
    """Share of an annual allowance for the given number of periods."""

    assert denominator > 0
    if annual.is_infinite():
        return annual
    return context.divide(context.multiply(annual, Decimal(numerator)), Decimal(denominator))

