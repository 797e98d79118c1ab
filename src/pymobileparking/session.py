"""Persisted login session."""

from __future__ import annotations

import json
import logging

from .const import AUTH_TOKEN_KEY, AUTH_USER_KEY
from .exceptions import PyMobileParkingError
from .models import User, UserSession
from .storage.base import KeyValueStore

_LOGGER = logging.getLogger(__name__)


def user_to_dict(user: User) -> dict[str, object]:
    return {"id": user.id, "email": user.email, "name": user.name}


def user_from_dict(data: object) -> User | None:
    if not isinstance(data, dict):
        return None
    user_id = data.get("id")
    email = data.get("email")
    if user_id is None or not isinstance(email, str):
        return None
    name = data.get("name")
    return User(id=user_id, email=email, name=name if isinstance(name, str) else "")


class SessionStore:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        token_key: str = AUTH_TOKEN_KEY,
        user_key: str = AUTH_USER_KEY,
    ) -> None:
        self._store = store
        self._token_key = token_key
        self._user_key = user_key

    async def save_session(self, token: str, user: User) -> None:
        await self._store.set(self._token_key, token)
        await self._store.set(self._user_key, json.dumps(user_to_dict(user), ensure_ascii=False))

    async def get_saved_token(self) -> str | None:
        try:
            return await self._store.get(self._token_key)
        except PyMobileParkingError as exc:
            _LOGGER.warning("Could not read saved token: %s", exc)
            return None

    async def get_saved_user(self) -> User | None:
        try:
            stored = await self._store.get(self._user_key)
            if not stored:
                return None
            return user_from_dict(json.loads(stored))
        except (PyMobileParkingError, ValueError) as exc:
            _LOGGER.warning("Could not read saved user: %s", exc)
            return None

    async def get_saved_session(self) -> UserSession | None:
        token = await self.get_saved_token()
        user = await self.get_saved_user()
        if not token or user is None:
            return None
        return UserSession(token=token, user=user)

    async def clear_session(self) -> None:
        await self._store.remove(self._token_key)
        await self._store.remove(self._user_key)
