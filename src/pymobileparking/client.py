"""Client facade for tickets, wallet and account access."""

from __future__ import annotations

import asyncio
import logging
import os
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

import aiohttp

from .api.auth import AuthApi
from .api.profile import ProfileApi
from .catalog import get_zone
from .const import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_EXTENSION_MINUTES,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_ZONE,
    INSUFFICIENT_FUNDS_BUY_MESSAGE,
    INSUFFICIENT_FUNDS_EXTEND_MESSAGE,
    INSUFFICIENT_FUNDS_TITLE,
    MAX_DURATION_MINUTES,
    MIN_DURATION_MINUTES,
    ZERO,
)
from .exceptions import InsufficientFundsError, PyMobileParkingError, ValidationError
from .models import (
    ExtensionResult,
    ParkingTicket,
    PurchaseResult,
    TicketState,
    TicketStatus,
    TopUpResult,
    UserProfile,
    UserSession,
)
from .pricing import add_minutes, compute_price, round2
from .session import SessionStore
from .status import StateCallback, StatusTicker, pick_ticket_to_display, sort_history, ticket_state
from .storage.base import KeyValueStore
from .storage.file import JsonFileStore
from .storage.memory import MemoryStore
from .tickets import TicketStore, extend_ticket_in_list
from .util import format_timestamp, mask_plate, normalize_plate, parse_minutes, utcnow
from .wallet import Wallet

_LOGGER = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=DEFAULT_TIMEOUT_SECONDS)


class ParkingClient:
    """Facade over the ticket list, wallet, login session and backend API."""

    def __init__(
        self,
        store: KeyValueStore | None = None,
        *,
        storage_path: str | os.PathLike[str] | None = None,
        session: aiohttp.ClientSession | None = None,
        base_url: str | None = None,
        api_uri: str | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
        retry_count: int = 0,
    ) -> None:
        if store is not None and storage_path is not None:
            raise ValidationError("Pass either store or storage_path, not both.")
        if store is None:
            store = JsonFileStore(storage_path) if storage_path is not None else MemoryStore()
        self._store = store
        self._tickets = TicketStore(store)
        self._wallet = Wallet(store)
        self._sessions = SessionStore(store)
        self._session = session
        self._owns_session = session is None
        self._base_url = base_url
        self._api_uri = api_uri
        self._timeout = timeout or _DEFAULT_TIMEOUT
        self._retry_count = max(0, retry_count)
        self._ledger_lock = asyncio.Lock()

    async def __aenter__(self) -> ParkingClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def tickets(self) -> TicketStore:
        return self._tickets

    @property
    def wallet(self) -> Wallet:
        return self._wallet

    @property
    def sessions(self) -> SessionStore:
        return self._sessions

    async def list_tickets(self) -> list[ParkingTicket]:
        return await self._tickets.load_tickets()

    async def history(self) -> list[ParkingTicket]:
        return sort_history(await self._tickets.load_tickets())

    async def current_ticket(self, now: datetime | None = None) -> ParkingTicket | None:
        return pick_ticket_to_display(await self._tickets.load_tickets(), now)

    async def current_state(self, now: datetime | None = None) -> TicketState:
        now = now or utcnow()
        return ticket_state(await self.current_ticket(now), now)

    def status_ticker(self, callback: StateCallback, *, interval: float = 1.0) -> StatusTicker:
        return StatusTicker(self.current_ticket, callback, interval=interval)

    async def get_balance(self) -> Decimal:
        return await self._wallet.get_balance()

    async def top_up(self, amount: object) -> TopUpResult:
        async with self._ledger_lock:
            return await self._wallet.top_up(amount)

    async def buy_ticket(
        self,
        plate: str,
        zone: str = DEFAULT_ZONE,
        duration_min: int | str = DEFAULT_DURATION_MINUTES,
        *,
        start_offset_min: int | str = 0,
        notify_before_end: bool = True,
        now: datetime | None = None,
    ) -> PurchaseResult:
        """Buy a ticket starting now or ``start_offset_min`` minutes from now.

        Raises ``InsufficientFundsError`` before anything is written when the
        balance does not cover the price. The ticket list and the balance are
        written independently; a failed write is logged and reported in the
        result.
        """
        normalized_plate = normalize_plate(plate)
        zone_cfg = get_zone(zone)
        duration = parse_minutes(duration_min)
        if not MIN_DURATION_MINUTES <= duration <= MAX_DURATION_MINUTES:
            raise ValidationError(
                f"duration_min must be between {MIN_DURATION_MINUTES} and {MAX_DURATION_MINUTES}."
            )
        offset = parse_minutes(start_offset_min)
        if offset < 0:
            raise ValidationError("start_offset_min must not be negative.")

        price = compute_price(duration, zone_cfg.rate_per_hour)
        now = now or utcnow()
        start = add_minutes(now, offset)
        end = add_minutes(start, price.billable_minutes)
        ticket = ParkingTicket(
            id=uuid.uuid4().hex,
            status=TicketStatus.ACTIVE,
            created_at=format_timestamp(now),
            plate=normalized_plate,
            zone=zone_cfg.id,
            zone_name=zone_cfg.name,
            start=format_timestamp(start),
            end=format_timestamp(end),
            duration_min=price.billable_minutes,
            amount=price.price,
            notify_before_end=notify_before_end,
        )

        async with self._ledger_lock:
            balance = await self._wallet.get_balance()
            if price.price > balance:
                raise InsufficientFundsError(
                    INSUFFICIENT_FUNDS_TITLE,
                    required=price.price,
                    available=balance,
                    user_message=INSUFFICIENT_FUNDS_BUY_MESSAGE,
                )

            _LOGGER.debug("Buying ticket for %s in zone %s", mask_plate(normalized_plate), zone_cfg.id)
            tickets = [ticket, *await self._tickets.load_tickets()]
            tickets_saved = await self._tickets.save_tickets(tickets)
            new_balance = balance
            balance_saved = True
            if price.price > ZERO:
                new_balance = round2(balance - price.price)
                balance_saved = await self._wallet.set_balance(new_balance)
        _LOGGER.debug("Ticket %s bought for %s", ticket.id, price.price)
        return PurchaseResult(
            ticket=ticket,
            tickets=tickets,
            balance=new_balance,
            tickets_saved=tickets_saved,
            balance_saved=balance_saved,
        )

    async def extend_ticket(
        self,
        ticket_id: str,
        extension_minutes: int = DEFAULT_EXTENSION_MINUTES,
        *,
        tickets: list[ParkingTicket] | None = None,
    ) -> ExtensionResult | None:
        """Extend a ticket and charge the marginal cost from the wallet.

        ``tickets`` is the list the caller is showing; the stored list is used
        when omitted. Returns ``None`` when the ticket does not exist. Raises
        ``InsufficientFundsError`` without writing anything when the balance
        does not cover the extra cost. Purchases, extensions and top-ups of
        one client run one at a time, since they share the ticket list and
        balance keys.
        """
        async with self._ledger_lock:
            source = tickets if tickets is not None else await self._tickets.load_tickets()
            extension = extend_ticket_in_list(source, ticket_id, extension_minutes)
            if extension is None:
                _LOGGER.debug("Ticket %s not found, nothing to extend", ticket_id)
                return None

            balance = await self._wallet.get_balance()
            if extension.extra_cost > balance:
                raise InsufficientFundsError(
                    INSUFFICIENT_FUNDS_TITLE,
                    required=extension.extra_cost,
                    available=balance,
                    user_message=INSUFFICIENT_FUNDS_EXTEND_MESSAGE,
                )

            tickets_saved = await self._tickets.save_tickets(extension.updated)
            new_balance = balance
            balance_saved = True
            if extension.extra_cost > ZERO:
                new_balance = round2(balance - extension.extra_cost)
                balance_saved = await self._wallet.set_balance(new_balance)
            _LOGGER.debug("Ticket %s extended by %s min for %s", ticket_id, extension_minutes, extension.extra_cost)
            return ExtensionResult(
                tickets=extension.updated,
                ticket=extension.updated_ticket,
                extra_cost=extension.extra_cost,
                balance=new_balance,
                tickets_saved=tickets_saved,
                balance_saved=balance_saved,
            )

    async def login(self, email: str, password: str) -> UserSession:
        user_session = await self._auth_api().login(email, password)
        await self._persist_session(user_session)
        return user_session

    async def register(self, name: str, email: str, password: str) -> UserSession:
        user_session = await self._auth_api().register(name, email, password)
        await self._persist_session(user_session)
        return user_session

    async def logout(self) -> None:
        await self._sessions.clear_session()

    async def saved_session(self) -> UserSession | None:
        return await self._sessions.get_saved_session()

    async def fetch_profile(self, user_id: int | str, fallback: UserProfile | None = None) -> UserProfile:
        return await self._profile_api().fetch_user_profile(user_id, fallback)

    async def update_profile(self, user_id: int | str, profile: UserProfile) -> UserProfile:
        return await self._profile_api().update_user_profile(user_id, profile)

    async def _persist_session(self, user_session: UserSession) -> None:
        try:
            await self._sessions.save_session(user_session.token, user_session.user)
        except PyMobileParkingError as exc:
            _LOGGER.warning("Could not persist login session: %s", exc)

    def _auth_api(self) -> AuthApi:
        return AuthApi(self._ensure_session(), **self._api_options())

    def _profile_api(self) -> ProfileApi:
        return ProfileApi(self._ensure_session(), **self._api_options())

    def _api_options(self) -> dict[str, Any]:
        return {
            "base_url": self._base_url,
            "api_uri": self._api_uri,
            "timeout": self._timeout,
            "retry_count": self._retry_count,
        }

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session
