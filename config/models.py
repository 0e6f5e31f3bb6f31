"""
SQLAlchemy ORM Models and record defaults
"""

from copy import deepcopy
from sqlalchemy import Column, Integer, String, Text, DateTime, Index
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

# Collection names double as JSON file names and as the `collection` column
USERS = "users"
PROFILES = "profiles"
SETTINGS = "settings"
APPOINTMENTS = "appointments"
HEALTH_DATA = "health_data"
MEDICATIONS = "medications"
DOCUMENTS = "documents"
VERIFICATION_CODES = "verification_codes"

COLLECTIONS = (
    USERS, PROFILES, SETTINGS, APPOINTMENTS,
    HEALTH_DATA, MEDICATIONS, DOCUMENTS, VERIFICATION_CODES,
)

# Collections a client may replace wholesale through the batch routes
BATCH_COLLECTIONS = (APPOINTMENTS, MEDICATIONS, DOCUMENTS)

DOCUMENT_TYPES = ("report", "prescription", "lab_result", "other")
SLEEP_QUALITIES = ("poor", "fair", "good", "excellent")
HEALTH_METRICS = ("bloodPressure", "heartRate", "weight", "sleep")
PASSWORD_RESET = "password_reset"

DEFAULT_SETTINGS = {
    "theme": "system",
    "notifications": {
        "appointments": True,
        "medications": True,
        "healthTips": True,
        "updates": True,
    },
    "privacySettings": {
        "shareData": False,
        "anonymousAnalytics": True,
    },
    "language": "en",
}

DEFAULT_PROFILE = {
    "id": "",
    "name": "",
    "email": "",
}


def default_settings(user_id):
    settings = deepcopy(DEFAULT_SETTINGS)
    settings["userId"] = user_id
    return settings


def empty_health_data(user_id=None):
    data = {metric: [] for metric in HEALTH_METRICS}
    if user_id is not None:
        data["userId"] = user_id
    return data


class Record(Base):
    """One element of a collection array, stored as a JSON payload."""

    __tablename__ = 'records'

    record_pk = Column(Integer, primary_key=True)
    collection = Column(String, nullable=False)
    position = Column(Integer, nullable=False)
    record_id = Column(String)
    user_id = Column(String)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('ix_records_collection_position', 'collection', 'position'),
    )
