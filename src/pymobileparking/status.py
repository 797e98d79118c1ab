"""Temporal status of tickets and the ticket shown on the home view."""

from __future__ import annotations

import asyncio
import inspect
import logging
import math
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime

from .const import LABEL_ACTIVE, LABEL_FINISHED, LABEL_NONE, LABEL_PLANNED
from .exceptions import ValidationError
from .models import ParkingTicket, TicketPhase, TicketState
from .util import parse_timestamp, utcnow

_LOGGER = logging.getLogger(__name__)

_LABELS = {
    TicketPhase.PLANNED: LABEL_PLANNED,
    TicketPhase.ACTIVE: LABEL_ACTIVE,
    TicketPhase.FINISHED: LABEL_FINISHED,
}


def _resolve_now(now: datetime | None) -> datetime:
    if now is None:
        return utcnow()
    if now.tzinfo is None:
        raise ValidationError("now must include timezone information.")
    return now


def _window(ticket: ParkingTicket) -> tuple[datetime, datetime]:
    return parse_timestamp(ticket.start), parse_timestamp(ticket.end)


def derive_status(ticket: ParkingTicket, now: datetime | None = None) -> TicketPhase:
    now = _resolve_now(now)
    start, end = _window(ticket)
    if now < start:
        return TicketPhase.PLANNED
    if now < end:
        return TicketPhase.ACTIVE
    return TicketPhase.FINISHED


def is_active(ticket: ParkingTicket, now: datetime | None = None) -> bool:
    return derive_status(ticket, now) is TicketPhase.ACTIVE


def is_planned(ticket: ParkingTicket, now: datetime | None = None) -> bool:
    return derive_status(ticket, now) is TicketPhase.PLANNED


def seconds_left(ticket: ParkingTicket, now: datetime | None = None) -> int:
    """Seconds until start for planned tickets, until end for active ones."""
    now = _resolve_now(now)
    start, end = _window(ticket)
    if now < start:
        target = start
    elif now < end:
        target = end
    else:
        return 0
    return max(0, math.floor((target - now).total_seconds()))


def remaining_minutes(ticket: ParkingTicket, now: datetime | None = None) -> int:
    now = _resolve_now(now)
    diff = (parse_timestamp(ticket.end) - now).total_seconds()
    return max(0, math.floor(diff / 60))


def ticket_state(ticket: ParkingTicket | None, now: datetime | None = None) -> TicketState:
    if ticket is None:
        return TicketState(phase=None, label=LABEL_NONE, seconds_left=0)
    now = _resolve_now(now)
    phase = derive_status(ticket, now)
    return TicketState(phase=phase, label=_LABELS[phase], seconds_left=seconds_left(ticket, now))


def format_countdown(total_seconds: int) -> str:
    total_seconds = max(0, int(total_seconds))
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def pick_ticket_to_display(
    tickets: Iterable[ParkingTicket],
    now: datetime | None = None,
) -> ParkingTicket | None:
    """Pick the ticket a user considers "current".

    Active tickets win (latest end first), then planned ones (earliest start
    first), then the most recently started ticket. Sorting is stable, so ties
    keep list order.
    """
    items = list(tickets)
    if not items:
        return None
    now = _resolve_now(now)

    active = [ticket for ticket in items if derive_status(ticket, now) is TicketPhase.ACTIVE]
    if active:
        active.sort(key=lambda ticket: parse_timestamp(ticket.end), reverse=True)
        return active[0]

    planned = [ticket for ticket in items if derive_status(ticket, now) is TicketPhase.PLANNED]
    if planned:
        planned.sort(key=lambda ticket: parse_timestamp(ticket.start))
        return planned[0]

    return sort_history(items)[0]


def sort_history(tickets: Iterable[ParkingTicket]) -> list[ParkingTicket]:
    """Return tickets ordered by start, newest first."""
    return sorted(tickets, key=lambda ticket: parse_timestamp(ticket.start), reverse=True)


TicketSource = Callable[[], "ParkingTicket | None | Awaitable[ParkingTicket | None]"]
StateCallback = Callable[[TicketState], "None | Awaitable[None]"]


class StatusTicker:
    """Recompute and publish a ticket's state on a fixed interval.

    Runs as a task on the current event loop. After ``stop`` returns no further
    state is published, even if a tick was in progress.
    """

    def __init__(
        self,
        get_ticket: TicketSource,
        callback: StateCallback,
        *,
        interval: float = 1.0,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive.")
        self._get_ticket = get_ticket
        self._callback = callback
        self._interval = interval
        self._clock = clock
        self._task: asyncio.Task[None] | None = None
        self._alive = True

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def __aenter__(self) -> StatusTicker:
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    def start(self) -> None:
        if self.running:
            return
        self._alive = True
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        self._alive = False
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def tick(self) -> TicketState | None:
        ticket = self._get_ticket()
        if inspect.isawaitable(ticket):
            ticket = await ticket
        if not self._alive:
            return None
        state = ticket_state(ticket, self._clock())
        result = self._callback(state)
        if inspect.isawaitable(result):
            await result
        return state

    async def _run(self) -> None:
        while self._alive:
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception:
                _LOGGER.warning("Ticket status refresh failed", exc_info=True)
            await asyncio.sleep(self._interval)
