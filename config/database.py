"""
Record Store

Flat persistence for AfiaTrack: one array of records per collection, every
record tagged with the owning `userId`. Each operation reads the whole
collection and rewrites it on mutation. There is no indexing, locking or
transaction spanning two calls.

Two backends share the same load/save contract:
- JsonFileBackend: one `<collection>.json` file per collection (default)
- SqlBackend: the same arrays stored as rows through SQLAlchemy
"""

import json
import logging
import shutil
import uuid
from datetime import datetime
from pathlib import Path
from sqlalchemy import create_engine, select, delete
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from config import settings
from config.models import Base, Record, COLLECTIONS
from config.settings import StorageBackend

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when a collection cannot be read or written."""


class JsonFileBackend:
    """Stores each collection as a JSON array in its own file."""

    def __init__(self, data_dir, backup_dir=None):
        self.data_dir = Path(data_dir)
        self.backup_dir = Path(backup_dir) if backup_dir else None

    def path_for(self, collection):
        return self.data_dir / f"{collection}.json"

    def load(self, collection):
        path = self.path_for(collection)
        if not path.exists():
            return []

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading collection '{collection}' from {path}: {e}")
            raise StoreError(f"Could not read {collection}") from e

        if not isinstance(data, list):
            logger.error(f"Collection file {path} does not hold a JSON array")
            raise StoreError(f"Corrupt collection {collection}")
        return data

    def save(self, collection, records):
        path = self.path_for(collection)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(records, f, indent=2)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error writing collection '{collection}' to {path}: {e}")
            raise StoreError(f"Could not write {collection}") from e

    def init(self):
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for collection in COLLECTIONS:
            if not self.path_for(collection).exists():
                self.save(collection, [])
        logger.info(f"JSON store initialized at {self.data_dir}")

    def backup(self):
        """
        Copy the data directory to a timestamped backup directory.

        Returns:
            str or None: Backup path, or None when there is nothing to back up
        """
        if not self.data_dir.exists():
            logger.warning("Data directory does not exist, cannot create backup")
            return None

        backup_root = self.backup_dir or self.data_dir.parent / "backups"
        backup_root.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = backup_root / f"afiatrack_backup_{timestamp}"

        try:
            shutil.copytree(self.data_dir, backup_path, dirs_exist_ok=True)
            logger.info(f"Data backed up to: {backup_path}")
            return str(backup_path)
        except OSError as e:
            logger.error(f"Error creating backup: {e}")
            return None


class SqlBackend:
    """Stores collection arrays as ordered rows of JSON payloads."""

    def __init__(self, database_url):
        url = make_url(database_url)
        if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(database_url, echo=False)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        Base.metadata.create_all(bind=self.engine)

    def load(self, collection):
        session = self.SessionLocal()
        try:
            stmt = (
                select(Record.payload)
                .where(Record.collection == collection)
                .order_by(Record.position)
            )
            payloads = session.execute(stmt).scalars().all()
            return [json.loads(payload) for payload in payloads]
        except (SQLAlchemyError, ValueError) as e:
            logger.error(f"Error reading collection '{collection}': {e}")
            raise StoreError(f"Could not read {collection}") from e
        finally:
            session.close()

    def save(self, collection, records):
        session = self.SessionLocal()
        try:
            session.execute(delete(Record).where(Record.collection == collection))
            for position, record in enumerate(records):
                session.add(Record(
                    collection=collection,
                    position=position,
                    record_id=record.get('id'),
                    user_id=record.get('userId'),
                    payload=json.dumps(record),
                ))
            session.commit()
        except (SQLAlchemyError, TypeError, ValueError) as e:
            session.rollback()
            logger.error(f"Error writing collection '{collection}': {e}")
            raise StoreError(f"Could not write {collection}") from e
        finally:
            session.close()

    def init(self):
        Base.metadata.create_all(bind=self.engine)
        logger.info("SQL store initialized")

    def backup(self):
        logger.warning("Backups are only supported for the JSON store")
        return None


class RecordStore:
    """
    Per-user view over a single collection.

    Lookups are linear scans over the whole array; collections are expected
    to hold tens of items per user.
    """

    def __init__(self, backend, collection, key='id'):
        self.backend = backend
        self.collection = collection
        self.key = key

    def all(self):
        return self.backend.load(self.collection)

    def replace_all(self, records):
        self.backend.save(self.collection, records)

    def find(self, predicate):
        for record in self.all():
            if predicate(record):
                return record
        return None

    def list(self, user_id):
        return [r for r in self.all() if r.get('userId') == user_id]

    def get(self, user_id, record_id):
        return self.find(lambda r: r.get(self.key) == record_id and r.get('userId') == user_id)

    def create(self, user_id, record):
        records = self.all()
        new_record = dict(record)
        if not new_record.get(self.key):
            new_record[self.key] = str(uuid.uuid4())
        new_record['userId'] = user_id
        records.append(new_record)
        self.replace_all(records)
        return new_record

    def update(self, user_id, record):
        records = self.all()
        for index, existing in enumerate(records):
            if existing.get(self.key) == record.get(self.key) and existing.get('userId') == user_id:
                records[index] = {**record, 'userId': user_id}
                self.replace_all(records)
                return records[index]
        return record

    def delete(self, user_id, record_id):
        records = self.all()
        remaining = [
            r for r in records
            if not (r.get(self.key) == record_id and r.get('userId') == user_id)
        ]
        if len(remaining) == len(records):
            return False
        self.replace_all(remaining)
        return True

    def put(self, record):
        """Replace the record with the same key, or append it."""
        records = self.all()
        for index, existing in enumerate(records):
            if existing.get(self.key) == record.get(self.key):
                records[index] = record
                break
        else:
            records.append(record)
        self.replace_all(records)
        return record

    def get_single(self, user_id):
        return self.find(lambda r: r.get('userId') == user_id)

    def put_single(self, user_id, document):
        """Store the one document a user owns in this collection."""
        records = self.all()
        stored = {**document, 'userId': user_id}
        for index, existing in enumerate(records):
            if existing.get('userId') == user_id:
                records[index] = stored
                break
        else:
            records.append(stored)
        self.replace_all(records)
        return stored


class Storage:
    """Entry point to every collection of one backend."""

    def __init__(self, backend):
        self.backend = backend
        self._stores = {}

    def records(self, collection):
        if collection not in self._stores:
            self._stores[collection] = RecordStore(self.backend, collection)
        return self._stores[collection]

    def init(self):
        self.backend.init()

    def backup(self):
        return self.backend.backup()


def create_storage(config):
    """
    Build the storage configured for an app or client.

    Args:
        config (dict): Mapping with STORAGE_BACKEND, DATA_DIR and DATABASE_URL

    Returns:
        Storage: Storage bound to the selected backend
    """
    backend = StorageBackend(config.get('STORAGE_BACKEND', StorageBackend.JSON))
    if backend == StorageBackend.SQL:
        return Storage(SqlBackend(config['DATABASE_URL']))
    return Storage(JsonFileBackend(config['DATA_DIR'], config.get('BACKUP_DIR')))


def init_storage():
    """
    Initialize the configured store with empty collections.
    """
    logger.info("Initializing storage...")
    storage = create_storage(settings.get_app_config())
    storage.init()
    return storage


def backup_storage():
    """
    Create a backup of the configured store.
    """
    return create_storage(settings.get_app_config()).backup()
