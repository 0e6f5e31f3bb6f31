"""
Configuration Management

Loads application settings from the environment (and an optional .env file).
"""

import os
from enum import Enum
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).parent.parent


class StorageBackend(str, Enum):
    JSON = "json"
    SQL = "sql"


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


DATA_DIR = Path(os.getenv("AFIA_DATA_DIR", BASE_DIR / "data"))
BACKUP_DIR = Path(os.getenv("AFIA_BACKUP_DIR", BASE_DIR / "backups"))
STORAGE_BACKEND = os.getenv("AFIA_STORAGE_BACKEND", StorageBackend.JSON.value)
DATABASE_URL = os.getenv("AFIA_DATABASE_URL", f"sqlite:///{DATA_DIR / 'afiatrack.db'}")

TIMEZONE = os.getenv("AFIA_TIMEZONE", "Africa/Nairobi")
SECRET_KEY = os.getenv("AFIA_SECRET_KEY", "dev-secret-change-in-production")
SEED_DEMO_DATA = _env_bool("AFIA_SEED_DEMO_DATA", True)
RESET_CODE_TTL_MINUTES = int(os.getenv("AFIA_RESET_CODE_TTL_MINUTES", "15"))

REMINDER_SOUND = os.getenv("AFIA_REMINDER_SOUND")
REMINDER_REFRESH_SECONDS = int(os.getenv("AFIA_REMINDER_REFRESH_SECONDS", "300"))
NOTIFICATIONS_ENABLED = _env_bool("AFIA_NOTIFICATIONS_ENABLED", True)

API_URL = os.getenv("AFIA_API_URL", "http://localhost:5000")
CLIENT_DIR = Path(os.getenv("AFIA_CLIENT_DIR", Path.home() / ".afiatrack"))


def get_app_config(overrides=None):
    """
    Build the Flask configuration mapping.

    Args:
        overrides (dict, optional): Values that replace the environment defaults

    Returns:
        dict: Configuration values keyed the way Flask expects them
    """
    config = {
        "SECRET_KEY": SECRET_KEY,
        "DATA_DIR": DATA_DIR,
        "BACKUP_DIR": BACKUP_DIR,
        "STORAGE_BACKEND": STORAGE_BACKEND,
        "DATABASE_URL": DATABASE_URL,
        "TIMEZONE": TIMEZONE,
        "SEED_DEMO_DATA": SEED_DEMO_DATA,
        "RESET_CODE_TTL_MINUTES": RESET_CODE_TTL_MINUTES,
    }
    if overrides:
        config.update(overrides)
    return config
