"""pyMobileParking package."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .client import ParkingClient
from .exceptions import (
    ApiError,
    AuthError,
    InsufficientFundsError,
    NetworkError,
    StorageError,
    ValidationError,
)
from .models import ParkingTicket, Price, TicketPhase, TicketStatus, TopUp, Zone
from .pricing import compute_price
from .status import derive_status, pick_ticket_to_display
from .tickets import TicketStore, extend_ticket_in_list

try:
    __version__ = version("pymobileparking")
except PackageNotFoundError:  # pragma: no cover - not installed
    __version__ = "0.0.0"

__all__ = [
    "ApiError",
    "AuthError",
    "InsufficientFundsError",
    "NetworkError",
    "ParkingClient",
    "ParkingTicket",
    "Price",
    "StorageError",
    "TicketPhase",
    "TicketStatus",
    "TicketStore",
    "TopUp",
    "ValidationError",
    "Zone",
    "__version__",
    "compute_price",
    "derive_status",
    "extend_ticket_in_list",
    "pick_ticket_to_display",
]
