"""Library exceptions."""

from __future__ import annotations


class PyMobileParkingError(Exception):
    """Base exception for the library."""

    error_type = "unknown"
    default_code: str | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        error_code: str | None = None,
        detail: str | None = None,
        user_message: str | None = None,
    ) -> None:
        text = message if message is not None else detail
        if text is None:
            super().__init__()
        else:
            super().__init__(text)
        self.error_code = error_code if error_code is not None else self.default_code
        self.detail = detail if detail is not None else message
        self.user_message = user_message


class ValidationError(PyMobileParkingError):
    """Raised when inputs fail validation."""

    error_type = "validation"
    default_code = "validation_error"


class InsufficientFundsError(PyMobileParkingError):
    """Raised when the wallet balance does not cover a charge."""

    error_type = "wallet"
    default_code = "insufficient_funds"

    def __init__(
        self,
        message: str | None = None,
        *,
        required: object = None,
        available: object = None,
        **kwargs: str | None,
    ) -> None:
        super().__init__(message, **kwargs)
        self.required = required
        self.available = available


class StorageError(PyMobileParkingError):
    """Raised by storage backends when a key cannot be read or written."""

    error_type = "storage"
    default_code = "storage_error"


class ConfigError(PyMobileParkingError):
    """Raised when packaged configuration data is missing or malformed."""

    error_type = "config"
    default_code = "config_error"


class ApiError(PyMobileParkingError):
    """Raised when the backend API returns an error."""

    error_type = "api"
    default_code = "api_error"

    def __init__(self, message: str | None = None, *, status: int | None = None, **kwargs: str | None) -> None:
        super().__init__(message, **kwargs)
        self.status = status


class AuthError(ApiError):
    """Raised when authentication fails."""

    error_type = "auth"
    default_code = "auth_error"


class NetworkError(ApiError):
    """Raised when network communication fails."""

    error_type = "network"
    default_code = "network_error"
