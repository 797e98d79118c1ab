"""Shared constants for storage keys, billing and defaults."""

from decimal import Decimal

BALANCE_KEY = "@parking_balance"
TICKETS_KEY = "@parking_tickets"
TOPUP_HISTORY_KEY = "@parking_topup_history"
AUTH_TOKEN_KEY = "@parking_auth_token"
AUTH_USER_KEY = "@parking_auth_user"

BILLING_QUANTUM_MINUTES = 15
MIN_DURATION_MINUTES = 15
MAX_DURATION_MINUTES = 8 * 60
DEFAULT_DURATION_MINUTES = 60
DEFAULT_EXTENSION_MINUTES = 15
DEFAULT_ZONE = "A"

CENT = Decimal("0.01")
ZERO = Decimal("0")

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT_SECONDS = 30
USERS_ENDPOINT = "/users"
SESSIONS_ENDPOINT = "/sessions"

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "pymobileparking",
}

INSUFFICIENT_FUNDS_TITLE = "Brak środków"
INSUFFICIENT_FUNDS_EXTEND_MESSAGE = "Doładuj saldo, aby przedłużyć bilet."
INSUFFICIENT_FUNDS_BUY_MESSAGE = "Doładuj saldo, aby kupić bilet."
INVALID_CREDENTIALS_MESSAGE = "Niepoprawny e-mail lub haslo."
EMAIL_TAKEN_MESSAGE = "Uzytkownik z tym e-mailem juz istnieje."

LABEL_NONE = "Brak"
LABEL_PLANNED = "Zaplanowany"
LABEL_ACTIVE = "Aktywny"
LABEL_FINISHED = "Zakończony"
