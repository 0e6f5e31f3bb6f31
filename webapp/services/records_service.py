"""
Records Service

Profile, settings and health-data operations plus the batch entry point
shared by appointments, medications and documents.
"""

import logging

from config.models import (
    PROFILES, SETTINGS, HEALTH_DATA, USERS, APPOINTMENTS, MEDICATIONS, DOCUMENTS,
    BATCH_COLLECTIONS, DOCUMENT_TYPES, SLEEP_QUALITIES, HEALTH_METRICS,
    DEFAULT_PROFILE, default_settings, empty_health_data,
)
from webapp.errors import ValidationError, NotFoundError
from webapp.services.reconciler import reconcile
from utils.date_converter import parse_reminder_time

logger = logging.getLogger(__name__)

FALLBACK_PROFILE_NAME = "User"
FALLBACK_PROFILE_EMAIL = "user@example.com"


def get_or_create_profile(storage, user_id):
    """
    Return the user's profile, creating a placeholder one on first access.
    """
    profiles = storage.records(PROFILES)
    profile = profiles.find(lambda p: p.get('id') == user_id)
    if profile:
        return profile

    profile = {**DEFAULT_PROFILE, 'id': user_id, 'name': FALLBACK_PROFILE_NAME, 'email': FALLBACK_PROFILE_EMAIL}
    logger.info(f"Creating default profile for user {user_id}")
    return profiles.put(profile)


def update_profile(storage, profile):
    if not profile.get('id'):
        raise ValidationError("User ID is required")
    return storage.records(PROFILES).put(profile)


def get_settings(storage, user_id):
    """Return the user's settings, persisting the defaults if none exist."""
    store = storage.records(SETTINGS)
    settings = store.get_single(user_id)
    if settings:
        return settings
    return store.put_single(user_id, default_settings(user_id))


def update_settings(storage, user_id, settings):
    if not isinstance(settings, dict):
        raise ValidationError("Settings must be an object")
    return storage.records(SETTINGS).put_single(user_id, settings)


def get_health_data(storage, user_id):
    data = storage.records(HEALTH_DATA).get_single(user_id)
    if not data:
        return empty_health_data(user_id)
    for metric in HEALTH_METRICS:
        data.setdefault(metric, [])
    return data


def update_health_data(storage, user_id, data):
    if not isinstance(data, dict):
        raise ValidationError("Health data must be an object")
    document = empty_health_data()
    for metric in HEALTH_METRICS:
        readings = data.get(metric) or []
        if not isinstance(readings, list):
            raise ValidationError(f"{metric} must be a list")
        document[metric] = readings
    return storage.records(HEALTH_DATA).put_single(user_id, document)


NUMERIC_READING_FIELDS = ("systolic", "diastolic", "value", "hours")


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_reading(metric, reading):
    required = {
        'bloodPressure': ('date', 'systolic', 'diastolic'),
        'heartRate': ('date', 'value'),
        'weight': ('date', 'value'),
        'sleep': ('date', 'hours', 'quality'),
    }
    if metric not in required:
        raise ValidationError(f"Unknown metric '{metric}'")
    if not isinstance(reading, dict):
        raise ValidationError("Reading must be an object")

    missing = [name for name in required[metric] if reading.get(name) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    for name in NUMERIC_READING_FIELDS:
        if name in reading and not _is_number(reading[name]):
            raise ValidationError(f"{name} must be a number")
    if metric == 'sleep' and reading['quality'] not in SLEEP_QUALITIES:
        raise ValidationError(f"Invalid sleep quality '{reading['quality']}'")


def add_health_reading(storage, user_id, metric, reading):
    """Append one reading to a metric. Readings are never deduplicated."""
    _validate_reading(metric, reading)
    data = get_health_data(storage, user_id)
    data[metric].append(reading)
    return storage.records(HEALTH_DATA).put_single(user_id, data)


def list_records(storage, collection, user_id):
    if collection not in BATCH_COLLECTIONS:
        raise NotFoundError(f"Unknown collection '{collection}'")
    return storage.records(collection).list(user_id)


def _validate_item(collection, item):
    if not isinstance(item, dict):
        raise ValidationError("Each item must be an object")

    if collection == APPOINTMENTS:
        if not item.get('title'):
            raise ValidationError("Appointment title is required")
    elif collection == MEDICATIONS:
        if not item.get('name'):
            raise ValidationError("Medication name is required")
        for value in item.get('reminderTimes') or []:
            try:
                parse_reminder_time(value)
            except ValueError as e:
                raise ValidationError(str(e)) from e
    elif collection == DOCUMENTS:
        if not item.get('title'):
            raise ValidationError("Document title is required")
        if item.get('type', 'other') not in DOCUMENT_TYPES:
            raise ValidationError(f"Invalid document type '{item.get('type')}'")


def batch_update(storage, collection, user_id, items):
    """
    Validate a submitted list and reconcile the stored collection with it.

    Raises:
        ValidationError: If the user id or items are missing or malformed
    """
    if collection not in BATCH_COLLECTIONS:
        raise NotFoundError(f"Unknown collection '{collection}'")
    if not user_id or items is None:
        raise ValidationError(f"User ID and {collection} are required")
    if not isinstance(items, list):
        raise ValidationError(f"{collection} must be a list")

    for item in items:
        _validate_item(collection, item)

    return reconcile(storage.records(collection), user_id, items)


def collect_user_data(storage, user_id):
    """Everything one user has recorded, keyed for export."""
    data = get_health_data(storage, user_id)
    return {
        **{metric: data.get(metric, []) for metric in HEALTH_METRICS},
        'appointments': storage.records(APPOINTMENTS).list(user_id),
        'medications': storage.records(MEDICATIONS).list(user_id),
        'documents': storage.records(DOCUMENTS).list(user_id),
    }


def user_exists(storage, user_id):
    return storage.records(USERS).find(lambda u: u.get('id') == user_id) is not None
