from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from pymobileparking.exceptions import ValidationError
from pymobileparking.models import ParkingTicket, TicketPhase, TicketState, TicketStatus
from pymobileparking.status import (
    StatusTicker,
    derive_status,
    format_countdown,
    is_active,
    is_planned,
    pick_ticket_to_display,
    remaining_minutes,
    seconds_left,
    sort_history,
    ticket_state,
)
from pymobileparking.util import format_timestamp

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


def _ticket(ticket_id: str, start_offset: int, end_offset: int) -> ParkingTicket:
    start = NOW + timedelta(minutes=start_offset)
    end = NOW + timedelta(minutes=end_offset)
    return ParkingTicket(
        id=ticket_id,
        status=TicketStatus.ACTIVE,
        created_at=format_timestamp(NOW),
        plate="WX 12345",
        zone="A",
        start=format_timestamp(start),
        end=format_timestamp(end),
        duration_min=end_offset - start_offset,
        amount=Decimal("6.00"),
        notify_before_end=True,
    )


def test_derive_status_phases() -> None:
    assert derive_status(_ticket("a", -5, 5), NOW) is TicketPhase.ACTIVE
    assert derive_status(_ticket("p", 10, 70), NOW) is TicketPhase.PLANNED
    assert derive_status(_ticket("f", -61, -1), NOW) is TicketPhase.FINISHED
    assert is_active(_ticket("a", -5, 5), NOW)
    assert is_planned(_ticket("p", 10, 70), NOW)
    assert not is_active(_ticket("p", 10, 70), NOW)


def test_derive_status_boundaries() -> None:
    assert derive_status(_ticket("start", 0, 15), NOW) is TicketPhase.ACTIVE
    assert derive_status(_ticket("end", -15, 0), NOW) is TicketPhase.FINISHED


def test_derive_status_requires_aware_now() -> None:
    ticket = _ticket("a", -5, 5)
    with pytest.raises(ValidationError):
        derive_status(ticket, datetime(2024, 1, 1, 12, 0))
    with pytest.raises(ValidationError):
        pick_ticket_to_display([ticket], datetime(2024, 1, 1, 12, 0))


def test_stored_status_does_not_affect_phase() -> None:
    finished = _ticket("f", -61, -1)
    assert finished.status is TicketStatus.ACTIVE
    assert derive_status(finished, NOW) is TicketPhase.FINISHED


def test_seconds_left() -> None:
    assert seconds_left(_ticket("p", 10, 70), NOW) == 600
    assert seconds_left(_ticket("a", -5, 5), NOW) == 300
    assert seconds_left(_ticket("f", -61, -1), NOW) == 0


def test_remaining_minutes() -> None:
    assert remaining_minutes(_ticket("a", -5, 5), NOW + timedelta(seconds=30)) == 4
    assert remaining_minutes(_ticket("f", -61, -1), NOW) == 0


def test_ticket_state_labels() -> None:
    assert ticket_state(None, NOW) == TicketState(phase=None, label="Brak", seconds_left=0)
    assert ticket_state(_ticket("p", 10, 70), NOW).label == "Zaplanowany"
    assert ticket_state(_ticket("a", -5, 5), NOW).label == "Aktywny"
    assert ticket_state(_ticket("f", -61, -1), NOW).label == "Zakończony"


def test_format_countdown() -> None:
    assert format_countdown(3725) == "01:02:05"
    assert format_countdown(-3) == "00:00:00"


def test_pick_ticket_empty() -> None:
    assert pick_ticket_to_display([], NOW) is None


def test_pick_ticket_prefers_latest_ending_active() -> None:
    short = _ticket("short", -5, 10)
    long = _ticket("long", -30, 60)
    planned = _ticket("planned", 5, 20)
    assert pick_ticket_to_display([short, planned, long], NOW) is long


def test_pick_ticket_active_tie_keeps_list_order() -> None:
    first = _ticket("first", -5, 30)
    second = _ticket("second", -10, 30)
    assert pick_ticket_to_display([first, second], NOW) is first


def test_pick_ticket_earliest_planned() -> None:
    later = _ticket("later", 60, 120)
    sooner = _ticket("sooner", 10, 25)
    finished = _ticket("finished", -60, -30)
    assert pick_ticket_to_display([later, finished, sooner], NOW) is sooner


def test_pick_ticket_falls_back_to_latest_start() -> None:
    old = _ticket("old", -300, -240)
    recent = _ticket("recent", -60, -15)
    assert pick_ticket_to_display([old, recent], NOW) is recent


def test_sort_history_newest_first() -> None:
    old = _ticket("old", -300, -240)
    recent = _ticket("recent", -60, -15)
    planned = _ticket("planned", 10, 25)
    assert [t.id for t in sort_history([old, planned, recent])] == ["planned", "recent", "old"]


@pytest.mark.asyncio
async def test_ticker_tick_supports_async_source() -> None:
    published: list[TicketState] = []
    ticket = _ticket("a", -5, 5)

    async def _source() -> ParkingTicket:
        return ticket

    ticker = StatusTicker(_source, published.append, clock=lambda: NOW)
    state = await ticker.tick()

    assert state == TicketState(phase=TicketPhase.ACTIVE, label="Aktywny", seconds_left=300)
    assert published == [state]


@pytest.mark.asyncio
async def test_ticker_publishes_until_stopped() -> None:
    published: list[TicketState] = []
    ticker = StatusTicker(lambda: None, published.append, interval=0.01)

    async with ticker:
        await asyncio.sleep(0.05)
        assert ticker.running

    count = len(published)
    await asyncio.sleep(0.03)

    assert count >= 1
    assert len(published) == count
    assert not ticker.running
    assert published[0].label == "Brak"


@pytest.mark.asyncio
async def test_ticker_discards_result_after_stop() -> None:
    published: list[TicketState] = []
    ticker = StatusTicker(lambda: None, published.append)
    await ticker.stop()

    assert await ticker.tick() is None
    assert published == []


@pytest.mark.asyncio
async def test_ticker_keeps_running_after_callback_error() -> None:
    calls = {"count": 0}

    def _callback(_state: TicketState) -> None:
        calls["count"] += 1
        raise RuntimeError("render failed")

    ticker = StatusTicker(lambda: None, _callback, interval=0.01)
    ticker.start()
    await asyncio.sleep(0.05)
    await ticker.stop()

    assert calls["count"] >= 2


def test_ticker_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        StatusTicker(lambda: None, lambda _state: None, interval=0)
