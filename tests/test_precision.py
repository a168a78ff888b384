#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import pytest

from decimal import Decimal

from paye.precision import *


nan = float('nan')
inf = Decimal('Infinity')


@pytest.mark.parametrize("x,expected", [
    (None, 0),
    (nan, 0),
    ('NaN', 0),
    ('abc', 0),
    ('', 0),
    (True, 1),
    (0.1, Decimal('0.1')),
    ('1,234.5', Decimal('1234.5')),
    (Decimal('2.5'), Decimal('2.5')),
])
def test_to_decimal(x:Number, expected:Decimal) -> None:
    assert to_decimal(x) == expected


def test_add() -> None:
    assert add(0.1, 0.2) == Decimal('0.30')
    assert str(add(0.1, 0.2)) == '0.30'
    assert add(nan, 1) == 1
    assert add(1, None) == 1


def test_subtract() -> None:
    assert subtract(0.3, 0.1) == Decimal('0.20')
    assert subtract(1, nan) == 1


def test_multiply() -> None:
    assert multiply(12570, 0.5) == 6285
    assert multiply(100, 0.125, precision=1) == Decimal('12.5')
    assert multiply(nan, 5) == 0


def test_divide() -> None:
    assert divide(10, 3) == Decimal('3.33')
    assert divide(2, 3) == Decimal('0.67')
    assert divide(1, 0) == 0
    assert divide(1, nan) == 0
    assert divide(1, 0, precision=4) == Decimal('0.0000')


@pytest.mark.parametrize("x,expected", [
    (2.675,   Decimal('2.68')),
    (0.125,   Decimal('0.13')),
    (-0.125,  Decimal('-0.13')),
    (1.005,   Decimal('1.01')),
    (5,       Decimal('5.00')),
])
def test_dround_half_up(x:Number, expected:Decimal) -> None:
    assert dround(x) == expected


def test_dround_idempotent() -> None:
    for x in [0.1, 2.675, 1234.5678, -3.14159, 10**9 + 0.005]:
        once = dround(x)
        assert dround(once) == once
        assert dround(once, 4) == once


def test_dround_infinity() -> None:
    assert dround(inf) == inf
    assert dround(-inf) == -inf


@pytest.mark.parametrize("amount,expected", [
    (0,         '£0.00'),
    (1234.5,    '£1,234.50'),
    (-5,        '-£5.00'),
    (1000000,   '£1,000,000.00'),
    (0.005,     '£0.01'),
    (nan,       '£0.00'),
    (inf,       'Unlimited'),
])
def test_format_currency(amount:Number, expected:str) -> None:
    assert format_currency(amount) == expected
