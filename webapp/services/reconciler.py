"""
Batch Reconciler

Brings a user's stored appointments, medications or documents in line with
the full list the client submits: ids that already exist are updated, new
ids are created, and stored ids missing from the list are deleted.
"""

import logging

logger = logging.getLogger(__name__)


def reconcile(store, user_id, desired):
    """
    Apply the create/update/delete diff between `desired` and the store.

    An id repeated in `desired` is created once and then updated, so the
    last copy wins. Changes are applied one call at a time, so a failure
    partway leaves the earlier changes in place.

    Args:
        store (RecordStore): Collection to reconcile
        user_id (str): Owner of the records
        desired (list): Complete list of records the user should end up with

    Returns:
        dict: Counts of created, updated and deleted records
    """
    current = store.list(user_id)
    stored_ids = {r.get('id') for r in current}
    counts = {'created': 0, 'updated': 0, 'deleted': 0}

    for item in desired:
        if item.get('id') and item['id'] in stored_ids:
            store.update(user_id, item)
            counts['updated'] += 1
        else:
            created = store.create(user_id, item)
            stored_ids.add(created['id'])
            counts['created'] += 1

    for record in current:
        if not any(item.get('id') == record.get('id') for item in desired):
            store.delete(user_id, record.get('id'))
            counts['deleted'] += 1

    logger.info(
        f"Reconciled {store.collection} for user {user_id}: "
        f"{counts['created']} created, {counts['updated']} updated, {counts['deleted']} deleted"
    )
    return counts
