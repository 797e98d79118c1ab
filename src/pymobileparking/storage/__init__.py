"""Storage backends for persisted state."""

from .base import KeyValueStore
from .file import JsonFileStore
from .memory import MemoryStore

__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore"]
