"""Shared utilities for validation and normalization."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation

from .exceptions import ValidationError

_WHITESPACE_RE = re.compile(r"\s+")
_MASK_RE = re.compile(r"[^A-Z0-9]")
_MINUTES_RE = re.compile(r"\d+")


def normalize_plate(plate: str) -> str:
    if not isinstance(plate, str):
        raise ValidationError("Plate must be a string.")
    normalized = _WHITESPACE_RE.sub(" ", plate.strip()).upper()
    if not normalized:
        raise ValidationError("Plate is empty after normalization.")
    return normalized


def mask_plate(plate: str) -> str:
    if not isinstance(plate, str):
        return "***"
    normalized = _MASK_RE.sub("", plate.upper())
    if not normalized:
        return "***"
    if len(normalized) <= 2:
        return "*" * len(normalized)
    if len(normalized) <= 4:
        return f"{normalized[:1]}{'*' * (len(normalized) - 2)}{normalized[-1:]}"
    masked = "*" * (len(normalized) - 4)
    return f"{normalized[:2]}{masked}{normalized[-2:]}"


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: str) -> datetime:
    if not isinstance(value, str) or not value:
        raise ValidationError("Timestamp must be a non-empty string.")
    raw = value.strip()
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError("Timestamp is not a valid ISO 8601 value.") from exc
    if parsed.tzinfo is None:
        raise ValidationError("Timestamp must include timezone information.")
    return parsed.astimezone(UTC)


def format_timestamp(value: datetime) -> str:
    """Format as UTC ISO 8601 with milliseconds and a ``Z`` suffix."""
    if value.tzinfo is None:
        raise ValidationError("Timestamp must include timezone information.")
    normalized = value.astimezone(UTC)
    return normalized.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def validate_ticket_window(start: str, end: str) -> tuple[str, str]:
    start_dt = parse_timestamp(start)
    end_dt = parse_timestamp(end)
    if end_dt <= start_dt:
        raise ValidationError("end must be after start.")
    return format_timestamp(start_dt), format_timestamp(end_dt)


def parse_amount(value: object) -> Decimal:
    """Parse a money amount, accepting a comma as the decimal separator."""
    if isinstance(value, bool):
        raise ValidationError("Amount must be a number.")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int | float):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        raw = value.strip().replace(",", ".")
        if not raw:
            raise ValidationError("Amount is empty.")
        try:
            amount = Decimal(raw)
        except InvalidOperation as exc:
            raise ValidationError("Amount is not a valid number.") from exc
    else:
        raise ValidationError("Amount must be a number.")
    if not amount.is_finite():
        raise ValidationError("Amount must be finite.")
    return amount


def format_amount(value: Decimal) -> str:
    """Format a decimal without trailing zeros (``Decimal("94.00")`` -> ``"94"``)."""
    text = format(value.normalize(), "f")
    return "0" if text in ("-0", "") else text


def json_number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def parse_minutes(value: object) -> int:
    """Parse a minute count from user input such as ``"30min"``."""
    if isinstance(value, bool):
        raise ValidationError("Minutes must be a number.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        match = _MINUTES_RE.search(value)
        if match is None:
            raise ValidationError("Minutes value does not contain a number.")
        return int(match.group())
    raise ValidationError("Minutes must be a number.")
