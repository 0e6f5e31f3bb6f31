"""
Batch Reconciler Tests
"""

from config.models import APPOINTMENTS, MEDICATIONS
from webapp.services.reconciler import reconcile


def _ids(store, user_id):
    return {r["id"] for r in store.list(user_id)}


def test_store_ends_up_matching_desired_ids(storage):
    store = storage.records(APPOINTMENTS)
    for record_id in ["A", "B", "C"]:
        store.create("U1", {"id": record_id, "title": record_id})

    counts = reconcile(store, "U1", [{"id": "B", "title": "b"}, {"id": "D", "title": "d"}])

    assert _ids(store, "U1") == {"B", "D"}
    assert counts == {"created": 1, "updated": 1, "deleted": 2}


def test_reconcile_twice_is_a_no_op_the_second_time(storage):
    store = storage.records(APPOINTMENTS)
    desired = [{"id": "A", "title": "X"}, {"id": "B", "title": "Y"}]

    reconcile(store, "U1", desired)
    first = store.list("U1")
    counts = reconcile(store, "U1", desired)

    assert store.list("U1") == first
    assert counts == {"created": 0, "updated": 2, "deleted": 0}


def test_empty_desired_list_deletes_everything(storage):
    store = storage.records(MEDICATIONS)
    store.create("U1", {"id": "A", "name": "Metformin"})

    counts = reconcile(store, "U1", [])

    assert store.list("U1") == []
    assert counts["deleted"] == 1


def test_other_users_records_are_untouched(storage):
    store = storage.records(APPOINTMENTS)
    store.create("U2", {"id": "Z", "title": "Theirs"})

    reconcile(store, "U1", [{"id": "A", "title": "Mine"}])

    assert _ids(store, "U2") == {"Z"}


def test_batch_route_updates_and_creates(client, storage):
    storage.records(APPOINTMENTS).create("U1", {"id": "A", "title": "X"})

    resp = client.post('/api/appointments/batch', json={
        'userId': 'U1',
        'items': [{'id': 'A', 'title': 'Y'}, {'id': 'B', 'title': 'Z'}],
    })

    assert resp.status_code == 200
    assert resp.get_json() == {'success': True, 'created': 1, 'updated': 1, 'deleted': 0}
    assert storage.records(APPOINTMENTS).list("U1") == [
        {'id': 'A', 'title': 'Y', 'userId': 'U1'},
        {'id': 'B', 'title': 'Z', 'userId': 'U1'},
    ]


def test_repeated_id_in_one_batch_keeps_a_single_record(storage):
    store = storage.records(APPOINTMENTS)

    counts = reconcile(store, "U1", [{"id": "A", "title": "First"}, {"id": "A", "title": "Second"}])

    assert store.list("U1") == [{"id": "A", "title": "Second", "userId": "U1"}]
    assert counts == {"created": 1, "updated": 1, "deleted": 0}
