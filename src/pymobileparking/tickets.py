"""Persisted ticket list and the pure ticket extension step."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import replace
from decimal import Decimal
from typing import Any

from .catalog import rate_for_zone
from .const import DEFAULT_EXTENSION_MINUTES, TICKETS_KEY, ZERO
from .exceptions import ValidationError
from .models import ParkingTicket, TicketExtension, TicketStatus
from .pricing import add_minutes, compute_price
from .storage.base import KeyValueStore
from .util import format_timestamp, json_number, parse_amount, parse_timestamp, validate_ticket_window

_LOGGER = logging.getLogger(__name__)

_REQUIRED_KEYS = (
    "id",
    "status",
    "createdAtISO",
    "plate",
    "zone",
    "startISO",
    "endISO",
    "durationMin",
    "amount",
)


def ticket_to_dict(ticket: ParkingTicket) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": ticket.id,
        "status": ticket.status.value,
        "createdAtISO": ticket.created_at,
        "plate": ticket.plate,
        "zone": ticket.zone,
    }
    if ticket.zone_name is not None:
        data["zoneName"] = ticket.zone_name
    data.update(
        {
            "startISO": ticket.start,
            "endISO": ticket.end,
            "durationMin": ticket.duration_min,
            "amount": json_number(ticket.amount),
            "notifyBeforeEnd": ticket.notify_before_end,
        }
    )
    return data


def ticket_from_dict(data: Mapping[str, Any]) -> ParkingTicket:
    if not isinstance(data, Mapping):
        raise ValidationError("Ticket record must be a JSON object.")
    missing = [key for key in _REQUIRED_KEYS if key not in data]
    if missing:
        raise ValidationError(f"Ticket record missing keys: {', '.join(missing)}.")
    ticket_id = data["id"]
    if not isinstance(ticket_id, str) or not ticket_id:
        raise ValidationError("Ticket id must be a non-empty string.")
    try:
        status = TicketStatus(data["status"])
    except ValueError as exc:
        raise ValidationError("Ticket status is not recognized.") from exc
    duration = data["durationMin"]
    if isinstance(duration, bool) or not isinstance(duration, int | float):
        raise ValidationError("Ticket durationMin must be a number.")
    if isinstance(duration, float) and not duration.is_integer():
        raise ValidationError("Ticket durationMin must be a whole number of minutes.")
    parse_timestamp(data["createdAtISO"])
    validate_ticket_window(data["startISO"], data["endISO"])
    zone_name = data.get("zoneName")
    return ParkingTicket(
        id=ticket_id,
        status=status,
        created_at=data["createdAtISO"],
        plate=str(data["plate"]),
        zone=str(data["zone"]),
        zone_name=zone_name if isinstance(zone_name, str) and zone_name else None,
        start=data["startISO"],
        end=data["endISO"],
        duration_min=int(duration),
        amount=parse_amount(data["amount"]),
        notify_before_end=bool(data.get("notifyBeforeEnd", False)),
    )


def dump_tickets(tickets: list[ParkingTicket]) -> str:
    return json.dumps(
        [ticket_to_dict(ticket) for ticket in tickets],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def parse_tickets(raw: str) -> list[ParkingTicket]:
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValidationError("Stored tickets must be a JSON array.")
    return [ticket_from_dict(item) for item in data]


class TicketStore:
    """Load and save the full ticket list under a single storage key."""

    def __init__(self, store: KeyValueStore, *, key: str = TICKETS_KEY) -> None:
        self._store = store
        self._key = key

    async def load_tickets(self) -> list[ParkingTicket]:
        """Return stored tickets; unreadable or corrupt data yields an empty list."""
        try:
            stored = await self._store.get(self._key)
            if not stored:
                return []
            return parse_tickets(stored)
        except Exception as exc:
            _LOGGER.warning("Could not load tickets: %s", exc)
            return []

    async def save_tickets(self, tickets: list[ParkingTicket]) -> bool:
        """Persist the full list, overwriting. Failures are logged, not raised."""
        try:
            await self._store.set(self._key, dump_tickets(tickets))
        except Exception as exc:
            _LOGGER.warning("Could not save tickets: %s", exc)
            return False
        _LOGGER.debug("Saved %s tickets", len(tickets))
        return True

    async def add_ticket(self, ticket: ParkingTicket) -> list[ParkingTicket]:
        existing = await self.load_tickets()
        updated = [ticket, *existing]
        await self.save_tickets(updated)
        return updated


def extend_ticket_in_list(
    tickets: list[ParkingTicket],
    ticket_id: str,
    extension_minutes: int = DEFAULT_EXTENSION_MINUTES,
) -> TicketExtension | None:
    """Extend one ticket and re-price its whole duration.

    Returns ``None`` when no ticket has ``ticket_id``. The extension adds
    ``extension_minutes`` to the billed duration and the price is recomputed
    from the new total, so ``extra_cost`` is the difference to what was already
    paid. Other tickets are returned as the same objects. Nothing is persisted.
    """
    target = next((ticket for ticket in tickets if ticket.id == ticket_id), None)
    if target is None:
        return None
    if isinstance(extension_minutes, bool) or not isinstance(extension_minutes, int):
        raise ValidationError("extension_minutes must be a whole number of minutes.")
    if extension_minutes <= 0:
        raise ValidationError("extension_minutes must be positive.")

    new_end = add_minutes(parse_timestamp(target.end), extension_minutes)
    new_duration = (target.duration_min or 0) + extension_minutes
    price = compute_price(new_duration, rate_for_zone(target.zone)).price
    extra_cost = max(ZERO, price - Decimal(target.amount))

    updated_ticket = replace(
        target,
        end=format_timestamp(new_end),
        duration_min=new_duration,
        amount=price,
    )
    updated = [updated_ticket if ticket.id == ticket_id else ticket for ticket in tickets]
    return TicketExtension(updated=updated, updated_ticket=updated_ticket, extra_cost=extra_cost)
