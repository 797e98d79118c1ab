"""Login and registration against the parking backend."""

from __future__ import annotations

import logging
import time
from typing import Any

from ..const import EMAIL_TAKEN_MESSAGE, INVALID_CREDENTIALS_MESSAGE, SESSIONS_ENDPOINT, USERS_ENDPOINT
from ..exceptions import ApiError, AuthError, PyMobileParkingError, ValidationError
from ..models import User, UserSession
from ..util import format_timestamp, utcnow
from .base import BaseApi

_LOGGER = logging.getLogger(__name__)


class AuthApi(BaseApi):
    """User accounts stored as plain records on the backend."""

    async def login(self, email: str, password: str) -> UserSession:
        email_value = self._require_text(email, "email")
        password_value = self._require_text(password, "password", strip=False)
        _LOGGER.debug("Login started")
        users = await self._find_users(email_value)
        match = next(
            (user for user in users if user.get("email") == email_value and user.get("password") == password_value),
            None,
        )
        if match is None:
            raise AuthError(INVALID_CREDENTIALS_MESSAGE, user_message=INVALID_CREDENTIALS_MESSAGE)
        user = self._map_user(match)
        session = await self._open_session(user)
        _LOGGER.debug("Login completed for user %s", user.id)
        return session

    async def register(self, name: str, email: str, password: str) -> UserSession:
        name_value = self._require_text(name, "name")
        email_value = self._require_text(email, "email")
        password_value = self._require_text(password, "password", strip=False)
        _LOGGER.debug("Registration started")
        existing = await self._find_users(email_value)
        if any(user.get("email") == email_value for user in existing):
            raise ValidationError(EMAIL_TAKEN_MESSAGE, user_message=EMAIL_TAKEN_MESSAGE)
        created = await self._request_json(
            "POST",
            USERS_ENDPOINT,
            json={"name": name_value, "email": email_value, "password": password_value},
        )
        if not isinstance(created, dict):
            raise ApiError("Registration response must be a JSON object.")
        user = self._map_user({"name": name_value, "email": email_value, **created})
        session = await self._open_session(user)
        _LOGGER.debug("Registration completed for user %s", user.id)
        return session

    async def _find_users(self, email: str) -> list[dict[str, Any]]:
        data = await self._request_json("GET", USERS_ENDPOINT, params={"email": email})
        if not isinstance(data, list):
            raise ApiError("Users response must be a JSON array.")
        return [item for item in data if isinstance(item, dict)]

    async def _open_session(self, user: User) -> UserSession:
        token = f"session-{user.id}-{int(time.time() * 1000)}"
        # The session record is informational; login succeeds without it.
        try:
            await self._request_json(
                "POST",
                SESSIONS_ENDPOINT,
                json={"userId": user.id, "token": token, "createdAt": format_timestamp(utcnow())},
            )
        except PyMobileParkingError as exc:
            _LOGGER.warning("Could not record session for user %s: %s", user.id, exc)
        return UserSession(token=token, user=user)

    def _map_user(self, data: dict[str, Any]) -> User:
        user_id = data.get("id")
        if user_id is None:
            raise ApiError("User record has no id.")
        name = data.get("name")
        return User(id=user_id, email=str(data.get("email", "")), name=name if isinstance(name, str) else "")

    def _require_text(self, value: str, field: str, *, strip: bool = True) -> str:
        if not isinstance(value, str):
            raise ValidationError(f"{field} must be a string.")
        normalized = value.strip() if strip else value
        if not normalized:
            raise ValidationError(f"{field} is required.")
        return normalized
