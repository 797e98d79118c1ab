"""Zone catalog loading."""

from __future__ import annotations

import json
from decimal import Decimal
from importlib import resources
from importlib.resources.abc import Traversable

from .const import ZERO
from .exceptions import ConfigError, ValidationError
from .models import Zone

CATALOG_FILENAME = "zones.json"
SCHEMA_FILENAME = "zones.schema.json"
_ZONE_CACHE: tuple[Zone, ...] | None = None


def _package_root() -> Traversable:
    return resources.files("pymobileparking")


def load_catalog_schema() -> dict:
    schema_path = _package_root() / SCHEMA_FILENAME
    return json.loads(schema_path.read_text(encoding="utf-8"))


def _build_zone(data: dict) -> Zone:
    if not isinstance(data, dict):
        raise ConfigError("Zone entry must be a JSON object.")
    missing = [key for key in ("id", "name", "rate_per_hour") if key not in data]
    if missing:
        raise ConfigError(f"Zone entry missing keys: {', '.join(missing)}.")
    zone_id = data["id"]
    name = data["name"]
    rate = data["rate_per_hour"]
    if not isinstance(zone_id, str) or not zone_id:
        raise ConfigError("Zone id must be a non-empty string.")
    if not isinstance(name, str) or not name:
        raise ConfigError("Zone name must be a non-empty string.")
    if isinstance(rate, bool) or not isinstance(rate, int | float) or rate < 0:
        raise ConfigError("Zone rate_per_hour must be a non-negative number.")
    return Zone(id=zone_id, name=name, rate_per_hour=Decimal(str(rate)))


def load_zones() -> list[Zone]:
    global _ZONE_CACHE
    if _ZONE_CACHE is not None:
        return list(_ZONE_CACHE)
    try:
        raw = (_package_root() / CATALOG_FILENAME).read_text(encoding="utf-8")
    except (FileNotFoundError, ModuleNotFoundError) as exc:
        raise ConfigError("Zone catalog was not found.") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError("Zone catalog is not valid JSON.") from exc
    if not isinstance(data, dict) or not isinstance(data.get("zones"), list):
        raise ConfigError("Zone catalog must contain a zones list.")
    zones = [_build_zone(entry) for entry in data["zones"]]
    ids = [zone.id for zone in zones]
    if len(set(ids)) != len(ids):
        raise ConfigError("Zone ids must be unique.")
    _ZONE_CACHE = tuple(zones)
    return list(_ZONE_CACHE)


def clear_zone_cache() -> None:
    """Clear the cached zone catalog (used in tests)."""
    global _ZONE_CACHE
    _ZONE_CACHE = None


def find_zone(zone_id: str) -> Zone | None:
    for zone in load_zones():
        if zone.id == zone_id:
            return zone
    return None


def get_zone(zone_id: str) -> Zone:
    zone = find_zone(zone_id)
    if zone is None:
        raise ValidationError(f"Unknown zone {zone_id!r}.")
    return zone


def rate_for_zone(zone_id: str) -> Decimal:
    """Hourly rate of a zone; unknown zones are priced at zero."""
    zone = find_zone(zone_id)
    return zone.rate_per_hour if zone is not None else ZERO


def zone_name(zone_id: str, stored_name: str | None = None) -> str:
    if stored_name:
        return stored_name
    zone = find_zone(zone_id)
    return zone.name if zone is not None else zone_id
