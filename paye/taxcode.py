#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

"""PAYE tax code interpretation.

See also:
- https://www.gov.uk/tax-codes
- https://www.gov.uk/tax-codes/what-your-tax-code-means
- https://www.gov.uk/hmrc-internal-manuals/paye-manual/paye11005
"""


import logging
import re
import typing

from decimal import Decimal
from enum import Enum

from tax.uk import marriage_allowance


logger = logging.getLogger('taxcode')


default_code = '1257L'


class Region(Enum):
    UK = 'UK'
    SCOTLAND = 'Scotland'
    WALES = 'Wales'


class SpecialCode(Enum):
    BR = 'BR'
    D0 = 'D0'
    D1 = 'D1'
    NT = 'NT'
    ZERO_T = '0T'


# Flat rate (percent) applied to all income, or None when the normal bands apply
special_rates:dict[SpecialCode, int|None] = {
    SpecialCode.BR: 20,
    SpecialCode.D0: 40,
    SpecialCode.D1: 45,
    SpecialCode.NT: 0,
    SpecialCode.ZERO_T: None,
}


class StandardCode(typing.NamedTuple):
    number: int
    suffix: str


class KCode(typing.NamedTuple):
    number: int


class FlatCode(typing.NamedTuple):
    special: SpecialCode


Variant = StandardCode | KCode | FlatCode


class TaxCode(typing.NamedTuple):
    """Parsed tax code."""

    code: str
    base_allowance: Decimal
    region: Region = Region.UK
    is_negative_allowance: bool = False
    special_code: SpecialCode|None = None
    tax_rate: int|None = None
    has_marriage_allowance: bool = False
    marriage_allowance_amount: int = 0
    is_non_cumulative: bool = False

    @property
    def is_no_tax(self) -> bool:
        return self.special_code is SpecialCode.NT

    @property
    def is_flat_rate(self) -> bool:
        return self.special_code in (SpecialCode.BR, SpecialCode.D0, SpecialCode.D1)

    def __str__(self) -> str:
        return self.code


DEFAULT = TaxCode(code=default_code, base_allowance=Decimal(12570))


_standard_re = re.compile(r'(?P<number>\d{1,6})(?P<suffix>[A-Z]?)')
_k_re = re.compile(r'K(?P<number>\d{1,6})|(?P<trailing>\d{1,6})K')


def normalize(code:str|None) -> str:
    if not code:
        return ''
    return ''.join(str(code).split()).upper()


def _split_region(code:str) -> tuple[Region, str]:
    if code.startswith('S'):
        return Region.SCOTLAND, code[1:]
    if code.startswith('C'):
        return Region.WALES, code[1:]
    return Region.UK, code


def _split_basis(code:str) -> tuple[bool, str]:
    non_cumulative = False
    if code.endswith(('W1', 'M1')):
        non_cumulative = True
        code = code[:-2]
    elif len(code) > 2 and code[-1] == '1' and code[-2] in 'LNTY' and code[-3].isdigit():
        # Trailing 1 after a suffix letter (e.g. 1100L1) carries no basis
        code = code[:-1]
    if 'X' in code:
        non_cumulative = True
        code = code.replace('X', '')
    return non_cumulative, code


def classify(code:str|None) -> tuple[Region, Variant|None]:
    """Classify a tax code into its region and variant.

    Returns a None variant for input that fits none of the known shapes.
    """

    code = normalize(code)
    region, rest = _split_region(code)
    _, rest = _split_basis(rest)

    try:
        special = SpecialCode(rest)
    except ValueError:
        pass
    else:
        return region, FlatCode(special)

    if 'K' in rest:
        mo = _k_re.search(rest)
        if mo is None:
            return region, None
        return region, KCode(int(mo.group('number') or mo.group('trailing')))

    mo = _standard_re.fullmatch(rest)
    if mo is None:
        return region, None
    return region, StandardCode(int(mo.group('number')), mo.group('suffix'))


def parse(code:str|None) -> TaxCode:
    """Parse a tax code.

    Never fails: empty or unrecognizable codes yield the default 1257L code.
    """

    normalized = normalize(code)
    if not normalized:
        return DEFAULT

    region, variant = classify(normalized)
    if variant is None:
        logger.debug('unrecognized tax code %r, using %s', code, default_code)
        return DEFAULT

    region_prefix = normalized[0] if region is not Region.UK else ''
    non_cumulative, _ = _split_basis(normalized[len(region_prefix):])

    if isinstance(variant, FlatCode):
        special = variant.special
        base_allowance = Decimal('Infinity') if special is SpecialCode.NT else Decimal(0)
        tax_code = TaxCode(
            code=normalized,
            base_allowance=base_allowance,
            region=region,
            special_code=special,
            tax_rate=special_rates[special],
            is_non_cumulative=non_cumulative,
        )
    elif isinstance(variant, KCode):
        tax_code = TaxCode(
            code=normalized,
            base_allowance=Decimal(-variant.number * 10),
            region=region,
            is_negative_allowance=True,
            is_non_cumulative=non_cumulative,
        )
    else:
        assert isinstance(variant, StandardCode)
        amount = 0
        if variant.suffix == 'M':
            amount = marriage_allowance
        elif variant.suffix == 'N':
            amount = -marriage_allowance
        tax_code = TaxCode(
            code=normalized,
            base_allowance=Decimal(variant.number * 10),
            region=region,
            has_marriage_allowance=amount != 0,
            marriage_allowance_amount=amount,
            is_non_cumulative=non_cumulative,
        )

    logger.debug('%s: %r', normalized, tax_code)
    return tax_code


_suffix_descriptions = {
    'L': 'You are entitled to the standard tax-free Personal Allowance.',
    'M': 'You have received a transfer of 10% of your partner’s Personal Allowance (Marriage Allowance).',
    'N': 'You have transferred 10% of your Personal Allowance to your partner (Marriage Allowance).',
    'T': 'Your tax code includes other calculations to work out your Personal Allowance.',
}

_special_descriptions = {
    SpecialCode.BR: 'All income from this job or pension is taxed at the basic rate (20%).',
    SpecialCode.D0: 'All income from this job or pension is taxed at the higher rate (40%).',
    SpecialCode.D1: 'All income from this job or pension is taxed at the additional rate (45%).',
    SpecialCode.NT: 'You are not paying any tax on this income.',
    SpecialCode.ZERO_T: 'Your Personal Allowance has been used up, or you have started a new job without a P45.',
}


def describe(code:str|None) -> str:
    """Explain a tax code in plain English."""

    tax_code = parse(code)
    sentences = []

    if tax_code.region is Region.SCOTLAND:
        sentences.append('Scottish income tax rates apply.')
    elif tax_code.region is Region.WALES:
        sentences.append('Welsh income tax rates apply.')

    if tax_code.special_code is not None:
        sentences.append(_special_descriptions[tax_code.special_code])
    elif tax_code.is_negative_allowance:
        sentences.append(f'You have income that is not being taxed another way, which adds £{-tax_code.base_allowance:,.0f} to your taxable income.')
        sentences.append('Tax deducted under a K code can never exceed half of your pay.')
    else:
        sentences.append(f'Personal allowance of £{tax_code.base_allowance:,.0f}.')
        _, variant = classify(tax_code.code)
        assert variant is None or isinstance(variant, StandardCode)
        if variant is not None and variant.suffix in _suffix_descriptions:
            sentences.append(_suffix_descriptions[variant.suffix])

    if tax_code.is_non_cumulative:
        sentences.append('Tax is calculated on the pay of each period only (emergency, non-cumulative basis).')

    return ' '.join(sentences)
