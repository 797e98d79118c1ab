"""Quarter-hour billing and price computation."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from .const import BILLING_QUANTUM_MINUTES, CENT, ZERO
from .models import Price


def round2(value: Decimal | int | float) -> Decimal:
    """Round half-up to two decimal places."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def ceil_to_quarter(minutes: int | float) -> int:
    """Round minutes up to the next billing quantum; exact multiples are unchanged."""
    return math.ceil(minutes / BILLING_QUANTUM_MINUTES) * BILLING_QUANTUM_MINUTES


def compute_price(duration_minutes: int | float, rate_per_hour: Decimal | int | float) -> Price:
    """Return billable minutes and price for a duration at an hourly rate.

    Negative durations are clamped to zero before rounding, so the result never
    bills negative time.
    """
    billable = ceil_to_quarter(max(0, duration_minutes))
    rate = Decimal(str(rate_per_hour))
    if rate == ZERO:
        return Price(billable_minutes=billable, price=round2(ZERO))
    return Price(billable_minutes=billable, price=round2(Decimal(billable) / Decimal(60) * rate))


def add_minutes(value: datetime, minutes: int | float) -> datetime:
    return value + timedelta(minutes=minutes)
