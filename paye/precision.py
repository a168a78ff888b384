#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

"""Decimal money arithmetic.

All operations take plain numbers (int, float, str or Decimal), treat NaN or
unparseable operands as zero, and return a Decimal rounded half-up to the
requested number of decimal places.
"""


import decimal
import math

from decimal import Decimal, ROUND_HALF_UP


# Trap nothing, so that invalid operations yield NaN rather than raising
context = decimal.Context(prec=28, rounding=ROUND_HALF_UP, traps=[])


Number = int | float | str | Decimal | None


def to_decimal(x:Number) -> Decimal:
    if x is None:
        return Decimal(0)
    if isinstance(x, Decimal):
        d = x
    elif isinstance(x, bool):
        d = Decimal(int(x))
    elif isinstance(x, int):
        d = Decimal(x)
    elif isinstance(x, float):
        if math.isnan(x):
            return Decimal(0)
        # Go through repr to avoid binary representation noise (0.1 -> 0.1000000000000000055...)
        d = Decimal(repr(x))
    else:
        try:
            d = Decimal(str(x).strip().replace(',', ''))
        except decimal.InvalidOperation:
            return Decimal(0)
    if d.is_nan():
        return Decimal(0)
    return d


def dround(x:Number, precision:int=2) -> Decimal:
    d = to_decimal(x)
    if d.is_infinite():
        return d
    return d.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP, context=context)


def add(a:Number, b:Number, precision:int=2) -> Decimal:
    return dround(context.add(to_decimal(a), to_decimal(b)), precision)


def subtract(a:Number, b:Number, precision:int=2) -> Decimal:
    return dround(context.subtract(to_decimal(a), to_decimal(b)), precision)


def multiply(a:Number, b:Number, precision:int=2) -> Decimal:
    return dround(context.multiply(to_decimal(a), to_decimal(b)), precision)


def divide(a:Number, b:Number, precision:int=2) -> Decimal:
    divisor = to_decimal(b)
    if divisor.is_zero():
        return dround(0, precision)
    return dround(context.divide(to_decimal(a), divisor), precision)


def format_currency(amount:Number, symbol:str='£') -> str:
    d = dround(amount)
    if d.is_infinite():
        return 'Unlimited'
    sign = '-' if d < 0 else ''
    return f'{sign}{symbol}{abs(d):,.2f}'
