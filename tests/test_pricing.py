from __future__ import annotations

from decimal import Decimal

import pytest

from pymobileparking.pricing import ceil_to_quarter, compute_price, round2


def test_compute_price_rounds_up_to_quarter_hour() -> None:
    price = compute_price(64, 6.0)
    assert price.billable_minutes == 75
    assert price.price == Decimal("7.50")


def test_compute_price_exact_hour() -> None:
    price = compute_price(60, 4.0)
    assert price.billable_minutes == 60
    assert price.price == Decimal("4.00")


@pytest.mark.parametrize("duration", [0, 1, 14, 15, 16, 29.5, 44.9, 45, 59, 61, 479, 480])
def test_billable_minutes_is_next_quarter(duration: float) -> None:
    billable = compute_price(duration, 3.0).billable_minutes
    assert billable % 15 == 0
    assert billable >= duration
    if duration % 15 == 0:
        assert billable == duration
    else:
        assert billable < duration + 15


@pytest.mark.parametrize("duration", [-1, -15, -0.5])
def test_negative_duration_is_clamped(duration: float) -> None:
    price = compute_price(duration, 6.0)
    assert price.billable_minutes == 0
    assert price.price == Decimal("0.00")


def test_zero_rate_is_free() -> None:
    assert compute_price(480, 0).price == Decimal("0")


def test_compute_price_accepts_decimal_rate() -> None:
    assert compute_price(45, Decimal("3.0")).price == Decimal("2.25")


def test_round2_is_half_up() -> None:
    assert round2(Decimal("2.345")) == Decimal("2.35")
    assert round2(2.675) == Decimal("2.68")
    assert round2(Decimal("-1.005")) == Decimal("-1.01")


def test_ceil_to_quarter() -> None:
    assert ceil_to_quarter(0) == 0
    assert ceil_to_quarter(15) == 15
    assert ceil_to_quarter(16) == 30
