#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import logging

import pytest

from decimal import Decimal

from paye.ni import *


rates_2024 = NIRates(Decimal('0.08'), Decimal('0.02'))


@pytest.mark.parametrize("gross,expected", [
    (0,       0),
    (-100,    0),
    (800,     0),
    (1048,    0),
    (1049,    0.12),
    (3000,    (3000 - 1048)*0.12),
    (4189,    (4189 - 1048)*0.12),
    (5000,    (4189 - 1048)*0.12 + (5000 - 4189)*0.02),
])
def test_compute_ni_monthly(gross:int, expected:float) -> None:
    assert float(compute_ni(gross)) == pytest.approx(expected, abs=1e-2)


def test_compute_ni_rates() -> None:
    assert compute_ni(5000, rates=rates_2024) == Decimal('267.50')


@pytest.mark.parametrize("period,gross,expected", [
    ('weekly',  200,    0),
    ('weekly',  500,    (500 - 242)*0.12),
    ('weekly',  1000,   (967 - 242)*0.12 + (1000 - 967)*0.02),
    ('annual',  60000,  (50270 - 12570)*0.12 + (60000 - 50270)*0.02),
])
def test_compute_ni_period(period:str, gross:int, expected:float) -> None:
    assert float(compute_ni(gross, period=period)) == pytest.approx(expected, abs=1e-2)


def test_compute_ni_monotonic() -> None:
    prev = Decimal(0)
    for gross in range(0, 10000, 37):
        ni = compute_ni(gross)
        assert ni >= prev
        assert ni >= 0
        prev = ni


def test_check_thresholds_default(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        assert check_thresholds(DEFAULT_THRESHOLDS) == []
    assert not caplog.records


def test_check_thresholds_inconsistent(caplog) -> None:
    ni_thresholds = NIThresholds(
        primary_threshold=thresholds(242, 2000, 12570),
        upper_earnings_limit=thresholds(967, 4189, 50270),
    )
    with caplog.at_level(logging.WARNING):
        warnings = check_thresholds(ni_thresholds)
    assert len(warnings) == 1
    assert 'monthly primary threshold' in warnings[0]
    assert len(caplog.records) == 1


def test_check_thresholds_order() -> None:
    ni_thresholds = NIThresholds(
        primary_threshold=thresholds(967, 4189, 50270),
        upper_earnings_limit=thresholds(242, 1048, 12570),
    )
    warnings = check_thresholds(ni_thresholds)
    assert len(warnings) == 3


def test_check_thresholds_negative() -> None:
    ni_thresholds = NIThresholds(
        primary_threshold=thresholds(-1, 1048, 12570),
        upper_earnings_limit=thresholds(967, 4189, 50270),
    )
    with pytest.raises(ValueError):
        check_thresholds(ni_thresholds)


def test_thresholds_from_annual() -> None:
    ni_thresholds = thresholds_from_annual(12570, 50270)
    assert ni_thresholds.primary_threshold.monthly == Decimal('1047.50')
    assert ni_thresholds.upper_earnings_limit.weekly == Decimal('966.73')
    assert check_thresholds(ni_thresholds) == []


def test_ni_bands() -> None:
    allocation = ni_bands(60000, rates=rates_2024)
    assert [b.name for b in allocation.bands] == ['Below Primary Threshold', 'Main rate', 'Higher rate']
    assert [b.amount for b in allocation.bands] == [12570, 37700, 9730]
    assert allocation.total_tax == Decimal('3016.00') + Decimal('194.60')
