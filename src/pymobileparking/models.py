"""Public data models."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class TicketStatus(str, Enum):
    """Administrative label stored on a ticket.

    This is not the temporal phase of the ticket; see ``status.derive_status``.
    """

    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class TicketPhase(str, Enum):
    """Temporal phase derived from the ticket window and the current time."""

    PLANNED = "planned"
    ACTIVE = "active"
    FINISHED = "finished"


@dataclass(frozen=True, slots=True)
class Zone:
    id: str
    name: str
    rate_per_hour: Decimal


@dataclass(frozen=True, slots=True)
class Price:
    billable_minutes: int
    price: Decimal


@dataclass(frozen=True, slots=True)
class ParkingTicket:
    id: str
    status: TicketStatus
    created_at: str
    plate: str
    zone: str
    start: str
    end: str
    duration_min: int
    amount: Decimal
    notify_before_end: bool
    zone_name: str | None = None


@dataclass(frozen=True, slots=True)
class TicketState:
    phase: TicketPhase | None
    label: str
    seconds_left: int


@dataclass(frozen=True, slots=True)
class TicketExtension:
    updated: list[ParkingTicket]
    updated_ticket: ParkingTicket | None
    extra_cost: Decimal


@dataclass(frozen=True, slots=True)
class ExtensionResult:
    tickets: list[ParkingTicket]
    ticket: ParkingTicket | None
    extra_cost: Decimal
    balance: Decimal
    tickets_saved: bool
    balance_saved: bool


@dataclass(frozen=True, slots=True)
class PurchaseResult:
    ticket: ParkingTicket
    tickets: list[ParkingTicket]
    balance: Decimal
    tickets_saved: bool
    balance_saved: bool


@dataclass(frozen=True, slots=True)
class TopUp:
    id: str
    amount: Decimal
    date: str


@dataclass(frozen=True, slots=True)
class TopUpResult:
    entry: TopUp
    balance: Decimal
    history: list[TopUp]
    balance_saved: bool
    history_saved: bool


@dataclass(frozen=True, slots=True)
class User:
    id: int | str
    email: str
    name: str


@dataclass(frozen=True, slots=True)
class UserSession:
    token: str
    user: User


@dataclass(frozen=True, slots=True)
class UserProfile:
    full_name: str
    email: str
    phone: str = ""
    default_zone: str = "A"
    default_duration_min: int = 60
    notify_before_end: bool = True
    allow_marketing: bool = False
    payment_method_label: str = ""
