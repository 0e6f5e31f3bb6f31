"""
Record Store Tests

Runs the same contract against the JSON file and SQL backends.
"""

import json
from pathlib import Path

import pytest

from config.database import JsonFileBackend, SqlBackend, Storage, StoreError
from config.models import APPOINTMENTS, COLLECTIONS


@pytest.fixture(params=["json", "sql"])
def any_storage(request, tmp_path):
    if request.param == "json":
        backend = JsonFileBackend(tmp_path / "data", tmp_path / "backups")
    else:
        backend = SqlBackend(f"sqlite:///{tmp_path / 'store.db'}")
    store = Storage(backend)
    store.init()
    return store


def test_create_assigns_id_and_owner(any_storage):
    store = any_storage.records(APPOINTMENTS)
    created = store.create("U1", {"title": "Checkup"})

    assert created["id"]
    assert created["userId"] == "U1"
    assert store.get("U1", created["id"]) == created


def test_create_keeps_client_id(any_storage):
    store = any_storage.records(APPOINTMENTS)
    created = store.create("U1", {"id": "A", "title": "Checkup"})
    assert created["id"] == "A"


def test_list_only_returns_own_records(any_storage):
    store = any_storage.records(APPOINTMENTS)
    store.create("U1", {"id": "A", "title": "Mine"})
    store.create("U2", {"id": "B", "title": "Theirs"})

    assert [r["id"] for r in store.list("U1")] == ["A"]
    assert store.get("U1", "B") is None


def test_update_replaces_matching_record(any_storage):
    store = any_storage.records(APPOINTMENTS)
    store.create("U1", {"id": "A", "title": "X"})

    store.update("U1", {"id": "A", "title": "Y"})

    assert store.list("U1") == [{"id": "A", "title": "Y", "userId": "U1"}]


def test_update_of_missing_record_changes_nothing(any_storage):
    store = any_storage.records(APPOINTMENTS)
    store.create("U1", {"id": "A", "title": "X"})

    result = store.update("U1", {"id": "missing", "title": "Y"})

    assert result == {"id": "missing", "title": "Y"}
    assert store.list("U1") == [{"id": "A", "title": "X", "userId": "U1"}]


def test_update_does_not_touch_other_users(any_storage):
    store = any_storage.records(APPOINTMENTS)
    store.create("U2", {"id": "A", "title": "X"})

    store.update("U1", {"id": "A", "title": "Y"})

    assert store.get("U2", "A")["title"] == "X"


def test_delete_reports_whether_anything_was_removed(any_storage):
    store = any_storage.records(APPOINTMENTS)
    store.create("U1", {"id": "A", "title": "X"})

    assert store.delete("U1", "A") is True
    assert store.delete("U1", "A") is False
    assert store.list("U1") == []


def test_put_upserts_by_key(any_storage):
    store = any_storage.records("users")
    store.put({"id": "U1", "username": "a"})
    store.put({"id": "U1", "username": "b"})

    assert store.all() == [{"id": "U1", "username": "b"}]


def test_single_document_per_user(any_storage):
    store = any_storage.records("settings")
    store.put_single("U1", {"theme": "dark"})
    store.put_single("U1", {"theme": "light"})
    store.put_single("U2", {"theme": "dark"})

    assert store.get_single("U1") == {"theme": "light", "userId": "U1"}
    assert len(store.all()) == 2


def test_order_is_preserved(any_storage):
    store = any_storage.records(APPOINTMENTS)
    for record_id in ["C", "A", "B"]:
        store.create("U1", {"id": record_id})

    assert [r["id"] for r in store.list("U1")] == ["C", "A", "B"]


def test_json_init_creates_every_collection(tmp_path):
    backend = JsonFileBackend(tmp_path / "data")
    backend.init()

    for collection in COLLECTIONS:
        assert json.loads(backend.path_for(collection).read_text()) == []


def test_json_missing_file_reads_as_empty(tmp_path):
    backend = JsonFileBackend(tmp_path / "data")
    assert backend.load(APPOINTMENTS) == []


def test_json_corrupt_file_raises_store_error(tmp_path):
    backend = JsonFileBackend(tmp_path / "data")
    backend.init()
    backend.path_for(APPOINTMENTS).write_text("{not json")

    with pytest.raises(StoreError):
        backend.load(APPOINTMENTS)


def test_json_non_array_raises_store_error(tmp_path):
    backend = JsonFileBackend(tmp_path / "data")
    backend.init()
    backend.path_for(APPOINTMENTS).write_text('{"id": "A"}')

    with pytest.raises(StoreError):
        backend.load(APPOINTMENTS)


def test_json_backup_copies_data_dir(tmp_path):
    backend = JsonFileBackend(tmp_path / "data", tmp_path / "backups")
    backend.init()
    backend.save(APPOINTMENTS, [{"id": "A", "userId": "U1"}])

    backup_path = backend.backup()

    assert backup_path is not None
    copied = json.loads((Path(backup_path) / "appointments.json").read_text())
    assert copied == [{"id": "A", "userId": "U1"}]


def test_sql_backup_is_unsupported(tmp_path):
    backend = SqlBackend(f"sqlite:///{tmp_path / 'store.db'}")
    assert backend.backup() is None
