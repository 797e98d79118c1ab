from pymobileparking.exceptions import (
    ApiError,
    AuthError,
    ConfigError,
    InsufficientFundsError,
    NetworkError,
    PyMobileParkingError,
    StorageError,
    ValidationError,
)


def test_error_defaults() -> None:
    exc = PyMobileParkingError("base error")
    assert exc.error_type == "unknown"
    assert exc.error_code is None
    assert exc.detail == "base error"
    assert exc.user_message is None


def test_error_detail_fallback() -> None:
    exc = StorageError(detail="disk full")
    assert str(exc) == "disk full"
    assert exc.detail == "disk full"
    assert exc.error_code == "storage_error"


def test_insufficient_funds_carries_amounts() -> None:
    exc = InsufficientFundsError(
        "Brak środków",
        required=5,
        available=1,
        user_message="Doładuj saldo, aby przedłużyć bilet.",
    )
    assert exc.error_type == "wallet"
    assert exc.error_code == "insufficient_funds"
    assert exc.required == 5
    assert exc.available == 1
    assert exc.user_message == "Doładuj saldo, aby przedłużyć bilet."


def test_api_errors_keep_status() -> None:
    exc = ApiError("HTTP 500: Server Error", status=500)
    assert exc.status == 500
    assert str(exc) == "HTTP 500: Server Error"
    assert isinstance(AuthError("nope"), ApiError)
    assert isinstance(NetworkError("nope"), ApiError)


def test_error_types_have_codes() -> None:
    assert AuthError("nope").error_code == "auth_error"
    assert NetworkError("nope").error_code == "network_error"
    assert ValidationError("nope").error_code == "validation_error"
    assert ApiError("nope").error_code == "api_error"
    assert ConfigError("nope").error_code == "config_error"
