"""User profile read and update."""

from __future__ import annotations

import logging
from typing import Any

from ..catalog import find_zone
from ..const import DEFAULT_DURATION_MINUTES, DEFAULT_ZONE, USERS_ENDPOINT
from ..exceptions import ApiError, ValidationError
from ..models import UserProfile
from .base import BaseApi

_LOGGER = logging.getLogger(__name__)


def _default_zone(profile: UserProfile) -> str:
    return profile.default_zone if find_zone(profile.default_zone) else DEFAULT_ZONE


def _default_duration(profile: UserProfile) -> int:
    return profile.default_duration_min if profile.default_duration_min > 0 else DEFAULT_DURATION_MINUTES


def normalize_profile(data: dict[str, Any], fallback: UserProfile | None = None) -> UserProfile:
    """Build a profile from a backend record, replacing invalid fields with defaults."""

    def _text(*keys: str, default: str = "") -> str:
        for key in keys:
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
        return default

    zone = data.get("defaultZone")
    duration = data.get("defaultDurationMin")
    notify = data.get("notifyBeforeEnd")
    marketing = data.get("allowMarketing")
    valid_duration = not isinstance(duration, bool) and isinstance(duration, int) and duration > 0
    base = fallback or UserProfile(full_name="", email="")
    return UserProfile(
        full_name=_text("fullName", "name", default=base.full_name),
        email=_text("email", default=base.email),
        phone=_text("phone", default=base.phone),
        default_zone=zone if isinstance(zone, str) and find_zone(zone) else _default_zone(base),
        default_duration_min=duration if valid_duration else _default_duration(base),
        notify_before_end=notify if isinstance(notify, bool) else base.notify_before_end,
        allow_marketing=marketing if isinstance(marketing, bool) else base.allow_marketing,
        payment_method_label=_text(
            "paymentMethodLabel",
            default=base.payment_method_label,
        ),
    )


def profile_to_payload(profile: UserProfile) -> dict[str, Any]:
    return {
        "name": profile.full_name,
        "fullName": profile.full_name,
        "email": profile.email,
        "phone": profile.phone,
        "defaultZone": profile.default_zone,
        "defaultDurationMin": profile.default_duration_min,
        "notifyBeforeEnd": profile.notify_before_end,
        "allowMarketing": profile.allow_marketing,
        "paymentMethodLabel": profile.payment_method_label,
    }


class ProfileApi(BaseApi):
    async def fetch_user_profile(
        self,
        user_id: int | str,
        fallback: UserProfile | None = None,
    ) -> UserProfile:
        _LOGGER.debug("Fetching profile for user %s", user_id)
        data = await self._request_json("GET", f"{USERS_ENDPOINT}/{self._require_id(user_id)}")
        if not isinstance(data, dict):
            raise ApiError("Profile response must be a JSON object.")
        return normalize_profile(data, fallback)

    async def update_user_profile(self, user_id: int | str, profile: UserProfile) -> UserProfile:
        _LOGGER.debug("Updating profile for user %s", user_id)
        data = await self._request_json(
            "PUT",
            f"{USERS_ENDPOINT}/{self._require_id(user_id)}",
            json=profile_to_payload(profile),
        )
        if not isinstance(data, dict):
            raise ApiError("Profile response must be a JSON object.")
        return normalize_profile(data, profile)

    def _require_id(self, value: int | str) -> str:
        if isinstance(value, bool) or value is None:
            raise ValidationError("user_id is required.")
        text = str(value).strip()
        if not text:
            raise ValidationError("user_id is required.")
        return text
