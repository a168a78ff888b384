#
# Copyright (c) 2023 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import os.path
import sys
import pytest


here = os.path.dirname(__file__)
sys.path.insert(0, here)


from paye.calculator import PayeCalculator
from paye.taxyear import BuiltinTaxYears


@pytest.fixture(scope="session")
def provider():
    return BuiltinTaxYears()


@pytest.fixture(scope="function")
def calculator(provider):
    return PayeCalculator(provider, memo_size=32)


@pytest.fixture(scope="session")
def year_data(provider):
    return provider.get('2024-25')
