"""Shared HTTP behavior for backend API clients."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from ..const import DEFAULT_BASE_URL, DEFAULT_HEADERS, DEFAULT_TIMEOUT_SECONDS
from ..exceptions import ApiError, AuthError, NetworkError, ValidationError

_LOGGER = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=DEFAULT_TIMEOUT_SECONDS)


class BaseApi:
    """Base class for REST clients of the parking backend."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        base_url: str | None = None,
        api_uri: str | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
        retry_count: int = 0,
    ) -> None:
        if session is None:
            raise ValidationError("Session is required.")
        self._session = session
        self._base_url = self._normalize_base_url(base_url or DEFAULT_BASE_URL)
        self._api_uri = self._normalize_api_uri(api_uri)
        self._timeout = timeout or _DEFAULT_TIMEOUT
        self._retry_count = max(0, retry_count)

    def _build_url(self, path: str) -> str:
        if not isinstance(path, str) or not path:
            raise ValidationError("Path must be a non-empty string.")
        if path.startswith("http://") or path.startswith("https://"):
            raise ValidationError("Use relative paths when building API requests.")
        normalized_path = path if path.startswith("/") else f"/{path}"
        return f"{self._base_url}{self._api_uri}{normalized_path}"

    async def _request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        url = self._build_url(path)
        return await self._request(method, url, **kwargs)

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        retries = self._retry_count if method.upper() == "GET" else 0
        attempts = retries + 1
        timeout = kwargs.pop("timeout", None) or self._timeout
        headers = {**DEFAULT_HEADERS, **kwargs.pop("headers", {})}
        last_error: Exception | None = None
        for attempt in range(attempts):
            try:
                async with self._session.request(
                    method,
                    url,
                    timeout=timeout,
                    headers=headers,
                    **kwargs,
                ) as response:
                    await self._raise_for_status(response)
                    try:
                        return await response.json(content_type=None)
                    except ValueError as exc:
                        raise ApiError("Response did not contain valid JSON.") from exc
            except (aiohttp.ClientError, TimeoutError) as exc:
                last_error = exc
                _LOGGER.debug("%s %s failed on attempt %s", method, url, attempt + 1)
                if attempt >= attempts - 1:
                    raise NetworkError("Network request failed.") from exc
        if last_error is not None:
            raise NetworkError("Network request failed.") from last_error
        raise ApiError("Request failed.")

    async def _raise_for_status(self, response: aiohttp.ClientResponse) -> None:
        if 200 <= response.status < 300:
            return
        message = await self._error_message_from_response(response)
        if response.status in (401, 403):
            raise AuthError(message, status=response.status)
        raise ApiError(message, status=response.status)

    async def _error_message_from_response(self, response: aiohttp.ClientResponse) -> str:
        try:
            body = await response.text()
        except (aiohttp.ClientError, UnicodeDecodeError, ValueError):
            body = ""
        detail = body.strip() or (response.reason or "")
        return f"HTTP {response.status}: {detail}"

    def _normalize_base_url(self, base_url: str) -> str:
        if not isinstance(base_url, str) or not base_url.strip():
            raise ValidationError("base_url must be a non-empty string.")
        return base_url.strip().rstrip("/")

    def _normalize_api_uri(self, api_uri: str | None) -> str:
        if api_uri is None:
            return ""
        if not isinstance(api_uri, str):
            raise ValidationError("api_uri must be a string.")
        normalized = api_uri.strip().strip("/")
        if not normalized:
            return ""
        return f"/{normalized}"
