#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import logging
import math
import re
import typing

from decimal import Decimal, InvalidOperation

from paye.taxcode import normalize


logger = logging.getLogger('validation')


max_salary = 10_000_000


class Validation(typing.NamedTuple):
    valid: bool
    message: str|None = None

    def __bool__(self) -> bool:
        return self.valid


VALID = Validation(True)


max_tax_code_length = 7


_grammars = [
    re.compile(r'BR|D0|D1|NT|0T'),
    re.compile(r'[SC]?K\d{1,4}'),
    re.compile(r'[SC]?\d{1,4}[TLMNWY](1|W1|M1)?'),
]


def validate_tax_code(code:str|None) -> Validation:
    code = normalize(code)
    if not code:
        return VALID
    if len(code) > max_tax_code_length:
        return Validation(False, f'Tax code cannot be longer than {max_tax_code_length} characters')
    for grammar in _grammars:
        if grammar.fullmatch(code):
            return VALID
    logger.debug('invalid tax code %r', code)
    return Validation(False, 'Invalid tax code format')


def _to_number(salary) -> float|None:
    if salary is None or isinstance(salary, bool):
        return None
    if isinstance(salary, str):
        try:
            salary = Decimal(salary.strip().replace(',', ''))
        except InvalidOperation:
            return None
    try:
        value = float(salary)
    except (TypeError, ValueError):
        return None
    if math.isnan(value):
        return None
    return value


def validate_salary(salary) -> Validation:
    value = _to_number(salary)
    if value is None or value <= 0:
        return Validation(False, 'Invalid salary amount')
    if value > max_salary:
        return Validation(False, 'Salary exceeds maximum allowed value')
    return VALID


def validate_period(period:int, periods:int=12) -> Validation:
    if not isinstance(period, int) or isinstance(period, bool) or not 1 <= period <= periods:
        return Validation(False, f'Period number must be between 1 and {periods}')
    return VALID


def validate_input(salary, tax_code:str|None) -> Validation:
    """Validate calculator form input, salary first."""

    result = validate_salary(salary)
    if not result:
        return result
    return validate_tax_code(tax_code)
