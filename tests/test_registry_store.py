import sqlite3

import pytest

from sproutgen.registry_store import SQLiteStore, ServiceNotFoundError


@pytest.fixture
def store(tmp_path):
    s = SQLiteStore(tmp_path / "registry.db")
    yield s
    s.close()


def test_first_allocation_gets_101(store):
    svc = store.allocate("alpha")
    assert svc.service_id == 101
    assert svc.name == "alpha"


def test_allocate_is_idempotent(store):
    first = store.allocate("alpha")
    again = store.allocate("alpha")
    assert again.service_id == first.service_id
    assert again.id == first.id
    assert len(store.list()) == 1


def test_ids_are_unique_and_increasing(store):
    ids = [store.allocate(n).service_id for n in ("a", "b", "c")]
    assert ids == sorted(ids)
    assert len(set(ids)) == 3
    assert ids[1] == ids[0] + 1


def test_get_returns_allocated_service(store):
    created = store.allocate("beta")
    found = store.get("beta")
    assert found.service_id == created.service_id
    assert found.created_at is not None


def test_get_unknown_raises(store):
    with pytest.raises(ServiceNotFoundError):
        store.get("missing")


def test_list_in_registration_order(store):
    for n in ("zeta", "alpha", "mid"):
        store.allocate(n)
    assert [s.name for s in store.list()] == ["zeta", "alpha", "mid"]


def test_list_empty(store):
    assert store.list() == []


def test_persists_across_reopen(tmp_path):
    path = tmp_path / "registry.db"
    with SQLiteStore(path) as s:
        allocated = s.allocate("gamma").service_id
    with SQLiteStore(path) as s:
        assert s.get("gamma").service_id == allocated
        assert s.allocate("delta").service_id == allocated + 1


def test_close_then_use_fails(tmp_path):
    s = SQLiteStore(tmp_path / "registry.db")
    s.close()
    with pytest.raises(sqlite3.ProgrammingError):
        s.list()


def test_open_directory_fails(tmp_path):
    with pytest.raises(sqlite3.Error):
        SQLiteStore(tmp_path)