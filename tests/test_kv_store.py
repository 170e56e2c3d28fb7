"""Tests for the key-value backends and the repository layer."""

from __future__ import annotations

from pathlib import Path

import pytest

from public_services_api.app.core.exceptions import NotFoundError, StoreError
from public_services_api.app.core.kv_store import (
    InMemoryKVStore,
    KVStore,
    SQLiteKVStore,
    create_kv_store,
)
from public_services_api.app.services import repositories
from public_services_api.app.schemas.service import Service


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> KVStore:
    if request.param == "memory":
        return InMemoryKVStore()
    return SQLiteKVStore(str(tmp_path / "kv.sqlite"))


def test_set_get_and_delete(store: KVStore) -> None:
    store.set("service:1", {"id": "1", "name": "Consulta"})

    assert store.get("service:1") == {"id": "1", "name": "Consulta"}

    store.delete("service:1")
    assert store.get("service:1") is None
    assert store.scan_by_prefix("service:") == []
    # Deleting again is a no-op.
    store.delete("service:1")


def test_set_replaces_whole_value(store: KVStore) -> None:
    store.set("user:1", {"id": "1", "name": "Ana", "favorites": ["a"]})
    store.set("user:1", {"id": "1", "name": "Ana"})

    assert store.get("user:1") == {"id": "1", "name": "Ana"}


def test_scan_by_prefix_matches_literal_prefix_only(store: KVStore) -> None:
    store.set("service:1", {"id": "1"})
    store.set("service:2", {"id": "2"})
    store.set("services:3", {"id": "3"})
    store.set("Service:4", {"id": "4"})
    store.set("a_b:5", {"id": "5"})
    store.set("axb:6", {"id": "6"})
    store.set("50%:7", {"id": "7"})
    store.set("500:8", {"id": "8"})

    assert sorted(v["id"] for v in store.scan_by_prefix("service:")) == ["1", "2"]
    assert [v["id"] for v in store.scan_by_prefix("a_b:")] == ["5"]
    assert [v["id"] for v in store.scan_by_prefix("50%")] == ["7"]


def test_mget_and_mdelete(store: KVStore) -> None:
    for i in range(3):
        store.set(f"review:{i}", {"id": str(i)})

    assert [v["id"] for v in store.mget(["review:2", "review:missing", "review:0"])] == ["2", "0"]

    store.mdelete(["review:0", "review:1"])
    assert [v["id"] for v in store.scan_by_prefix("review:")] == ["2"]


def test_memory_store_returns_copies() -> None:
    store = InMemoryKVStore()
    store.set("user:1", {"id": "1", "favorites": []})

    store.get("user:1")["favorites"].append("x")

    assert store.get("user:1") == {"id": "1", "favorites": []}


def test_sqlite_store_persists_across_instances(tmp_path: Path) -> None:
    path = str(tmp_path / "kv.sqlite")
    SQLiteKVStore(path).set("service:1", {"id": "1", "name": "Ortopedia"})

    assert SQLiteKVStore(path).get("service:1") == {"id": "1", "name": "Ortopedia"}


def test_sqlite_store_rejects_unserialisable_values(tmp_path: Path) -> None:
    store = SQLiteKVStore(str(tmp_path / "kv.sqlite"))

    with pytest.raises(StoreError):
        store.set("service:1", {"id": "1", "when": object()})


def test_create_kv_store_rejects_unknown_backend() -> None:
    assert isinstance(create_kv_store("memory"), InMemoryKVStore)
    with pytest.raises(ValueError):
        create_kv_store("redis")


def _service(**fields) -> Service:
    data = {
        "id": "svc-1",
        "name": "Consulta",
        "category": "Odontologia",
        "institution_id": "inst-1",
        "created_at": "2025-01-01T00:00:00.000Z",
    }
    data.update(fields)
    return Service(**data)


def test_repository_update_merges_fields() -> None:
    repo = repositories.services(InMemoryKVStore())
    repo.create(_service(description="Limpeza", location="Centro"))

    updated = repo.update("svc-1", {"name": "Consulta geral"})

    assert updated.name == "Consulta geral"
    assert updated.description == "Limpeza"
    assert updated.location == "Centro"
    assert updated.updated_at is not None
    stored = repo.store.get("service:svc-1")
    assert stored["name"] == "Consulta geral"
    assert stored["institutionId"] == "inst-1"


def test_repository_update_of_missing_record_is_not_found() -> None:
    repo = repositories.services(InMemoryKVStore())

    with pytest.raises(NotFoundError, match="Service not found"):
        repo.update("missing", {"name": "x"})


def test_repository_update_rejects_invalid_result() -> None:
    repo = repositories.services(InMemoryKVStore())
    repo.create(_service())

    with pytest.raises(StoreError):
        repo.update("svc-1", {"rating": "excellent"})


def test_repository_list_skips_malformed_records() -> None:
    store = InMemoryKVStore()
    repo = repositories.services(store)
    repo.create(_service())
    store.set("service:broken", {"id": "broken"})

    assert [s.id for s in repo.list()] == ["svc-1"]


def test_repository_uses_camel_case_keys() -> None:
    store = InMemoryKVStore()
    repositories.services(store).create(_service(image=None))

    stored = store.get("service:svc-1")
    assert stored["reviewCount"] == 0
    assert stored["createdAt"] == "2025-01-01T00:00:00.000Z"
    assert "image" not in stored
