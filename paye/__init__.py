#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


from .taxcode import TaxCode, Region, SpecialCode, parse, classify, describe
from .validation import Validation, validate_tax_code, validate_salary, validate_input
from .taxyear import TaxYearData, BuiltinTaxYears, UnknownTaxYear
from .calculator import PayeCalculator, Period, PeriodType, TaxCalculation, weekly_breakdown
