"""Key-value storage port."""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Asynchronous string-keyed store of string values.

    Backends raise ``StorageError`` when a key cannot be read or written.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value, or ``None`` when the key is absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a value, overwriting any previous one."""

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every key."""
