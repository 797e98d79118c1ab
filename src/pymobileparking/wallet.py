"""Wallet balance and top-up history."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from decimal import Decimal

from .const import BALANCE_KEY, TOPUP_HISTORY_KEY, ZERO
from .exceptions import ValidationError
from .models import TopUp, TopUpResult
from .pricing import round2
from .storage.base import KeyValueStore
from .util import format_amount, format_timestamp, json_number, parse_amount, utcnow

_LOGGER = logging.getLogger(__name__)


class Wallet:
    """Balance and top-up history, each persisted under its own key."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        balance_key: str = BALANCE_KEY,
        history_key: str = TOPUP_HISTORY_KEY,
    ) -> None:
        self._store = store
        self._balance_key = balance_key
        self._history_key = history_key

    async def get_balance(self) -> Decimal:
        """Return the stored balance; a missing or unreadable value counts as zero."""
        try:
            stored = await self._store.get(self._balance_key)
        except Exception as exc:
            _LOGGER.warning("Could not read balance: %s", exc)
            return ZERO
        if stored is None:
            return ZERO
        try:
            return parse_amount(stored)
        except ValidationError:
            _LOGGER.warning("Stored balance %r is not a number", stored)
            return ZERO

    async def set_balance(self, value: Decimal) -> bool:
        try:
            await self._store.set(self._balance_key, format_amount(value))
        except Exception as exc:
            _LOGGER.error("Could not save balance: %s", exc)
            return False
        return True

    async def load_history(self) -> list[TopUp]:
        try:
            stored = await self._store.get(self._history_key)
            if not stored:
                return []
            data = json.loads(stored)
            if not isinstance(data, list):
                raise ValidationError("Top-up history must be a JSON array.")
            return [
                TopUp(id=str(item["id"]), amount=parse_amount(item["amount"]), date=str(item["date"]))
                for item in data
            ]
        except Exception as exc:
            _LOGGER.warning("Could not load top-up history: %s", exc)
            return []

    async def save_history(self, entries: list[TopUp]) -> bool:
        payload = [
            {"id": entry.id, "amount": json_number(entry.amount), "date": entry.date}
            for entry in entries
        ]
        try:
            await self._store.set(self._history_key, json.dumps(payload, separators=(",", ":")))
        except Exception as exc:
            _LOGGER.warning("Could not save top-up history: %s", exc)
            return False
        return True

    async def top_up(self, amount: object, *, now: datetime | None = None) -> TopUpResult:
        value = parse_amount(amount)
        if value <= ZERO:
            raise ValidationError("Top-up amount must be greater than zero.")
        value = round2(value)
        balance = round2(await self.get_balance() + value)
        entry = TopUp(id=uuid.uuid4().hex, amount=value, date=format_timestamp(now or utcnow()))
        history = [entry, *await self.load_history()]

        balance_saved = await self.set_balance(balance)
        history_saved = await self.save_history(history)
        _LOGGER.debug("Wallet topped up by %s, balance %s", value, balance)
        return TopUpResult(
            entry=entry,
            balance=balance,
            history=history,
            balance_saved=balance_saved,
            history_saved=history_saved,
        )
