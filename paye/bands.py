#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import typing

from decimal import Decimal

from paye.precision import Number, context, dround, to_decimal


class TaxBand(typing.NamedTuple):
    name: str
    rate: Decimal           # percent
    start: Decimal
    end: Decimal|None       # None for unbounded

    @property
    def width(self) -> Decimal|None:
        if self.end is None:
            return None
        return self.end - self.start


def band(name:str, rate:Number, start:Number, end:Number) -> TaxBand:
    return TaxBand(name, to_decimal(rate), to_decimal(start), None if end is None else to_decimal(end))


class BandAllocation(typing.NamedTuple):
    name: str
    rate: Decimal
    start: Decimal
    end: Decimal|None
    amount: Decimal
    tax: Decimal


class Allocation(typing.NamedTuple):
    bands: tuple[BandAllocation, ...]
    total_tax: Decimal

    @property
    def total_amount(self) -> Decimal:
        return sum((b.amount for b in self.bands), Decimal(0))


def check_bands(bands:typing.Sequence[TaxBand]) -> None:
    if not bands:
        raise ValueError('no tax bands')
    if bands[0].start != 0:
        raise ValueError(f'first band {bands[0].name!r} starts at {bands[0].start}, not 0')
    for prev, succ in zip(bands, bands[1:]):
        if prev.end is None:
            raise ValueError(f'band {prev.name!r} is unbounded but is not the last')
        if prev.end != succ.start:
            raise ValueError(f'band {succ.name!r} starts at {succ.start} instead of {prev.end}')
    if bands[-1].end is not None:
        raise ValueError(f'last band {bands[-1].name!r} is bounded')


def allocate(amount:Number, bands:typing.Sequence[TaxBand]) -> Allocation:
    """Split an amount across progressive bands and tax each slice.

    Bands above the amount are still reported, with zero amount and tax.
    """

    remaining = to_decimal(amount)
    if remaining < 0 or remaining.is_infinite():
        remaining = Decimal(0)

    allocations = []
    total_tax = Decimal(0)
    for b in sorted(bands, key=lambda b: b.start):
        width = b.width
        if remaining <= 0:
            allocated = Decimal(0)
        elif width is None:
            allocated = remaining
        else:
            allocated = min(remaining, max(width, Decimal(0)))
        remaining -= allocated
        tax = dround(context.multiply(allocated, b.rate) / 100)
        total_tax += tax
        allocations.append(BandAllocation(b.name, b.rate, b.start, b.end, allocated, tax))

    return Allocation(tuple(allocations), total_tax)


def scale_bands(bands:typing.Sequence[TaxBand], numerator:Number, denominator:Number) -> list[TaxBand]:
    """Prorate band limits, e.g. by 3/12 for the third month of the tax year."""

    n = to_decimal(numerator)
    d = to_decimal(denominator)
    assert d > 0

    def scale(x:Decimal) -> Decimal:
        return context.divide(context.multiply(x, n), d)

    return [
        b._replace(start=scale(b.start), end=None if b.end is None else scale(b.end))
        for b in bands
    ]


def flat_band(rate:Number, name:str='Flat rate') -> list[TaxBand]:
    return [band(name, rate, 0, None)]
