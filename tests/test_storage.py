from __future__ import annotations

import pytest

from pymobileparking.exceptions import StorageError
from pymobileparking.storage import JsonFileStore, MemoryStore
from pymobileparking.tickets import TicketStore


@pytest.mark.asyncio
async def test_memory_store_roundtrip() -> None:
    store = MemoryStore({"a": "1"})
    assert await store.get("a") == "1"
    assert await store.get("missing") is None

    await store.set("b", "2")
    await store.remove("a")
    await store.remove("missing")

    assert store.data == {"b": "2"}
    await store.clear()
    assert store.data == {}


@pytest.mark.asyncio
async def test_json_file_store_persists_between_instances(tmp_path) -> None:
    path = tmp_path / "state" / "storage.json"
    store = JsonFileStore(path)
    await store.set("@parking_balance", "8.5")
    await store.set("@parking_tickets", "[]")

    reopened = JsonFileStore(path)
    assert await reopened.get("@parking_balance") == "8.5"
    assert await reopened.get("@parking_tickets") == "[]"

    await reopened.remove("@parking_balance")
    assert await store.get("@parking_balance") is None

    await reopened.clear()
    assert await store.get("@parking_tickets") is None


@pytest.mark.asyncio
async def test_json_file_store_missing_file_reads_empty(tmp_path) -> None:
    store = JsonFileStore(tmp_path / "absent.json")
    assert await store.get("anything") is None


@pytest.mark.asyncio
async def test_json_file_store_corrupt_file_raises(tmp_path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{bad json", encoding="utf-8")
    store = JsonFileStore(path)

    with pytest.raises(StorageError):
        await store.get("@parking_tickets")


@pytest.mark.asyncio
async def test_ticket_store_recovers_from_corrupt_file(tmp_path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[1, 2", encoding="utf-8")

    assert await TicketStore(JsonFileStore(path)).load_tickets() == []


@pytest.mark.asyncio
async def test_json_file_store_rejects_non_string_values(tmp_path) -> None:
    store = JsonFileStore(tmp_path / "storage.json")
    with pytest.raises(StorageError):
        await store.set("key", 5)  # type: ignore[arg-type]
