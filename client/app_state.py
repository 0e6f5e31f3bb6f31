"""
App State

Client-side holder for the logged-in user's data. It keeps a cached copy
of profile, settings, appointments, health data, medications and
documents, and reads and writes them through the API.

The first failed API call switches the holder into fallback mode for the
rest of its life: from then on the same operations run against a local
JSON store in the client directory.
"""

import logging

from config import settings
from config.database import JsonFileBackend, Storage
from config.models import APPOINTMENTS, MEDICATIONS, DOCUMENTS
from webapp.services import records_service
from client.api_client import ApiClient, ApiError
from client.session import SessionStore

logger = logging.getLogger(__name__)


class AppState:
    """
    Args:
        api (ApiClient, optional): Remote client
        session (SessionStore, optional): Where the user id is kept
        local_storage (Storage, optional): Store used in fallback mode
        scheduler (ReminderScheduler, optional): Rescheduled when medications change
    """

    def __init__(self, api=None, session=None, local_storage=None, scheduler=None):
        self.api = api or ApiClient()
        self.session = session or SessionStore()
        self.scheduler = scheduler
        self.use_local_storage = False
        self._local_storage = local_storage
        self._reset_cache()

    def _reset_cache(self):
        self.user = None
        self.profile = None
        self.settings = None
        self.appointments = []
        self.health_data = None
        self.medications = []
        self.documents = []

    @property
    def local_storage(self):
        if self._local_storage is None:
            backend = JsonFileBackend(settings.CLIENT_DIR / "data")
            self._local_storage = Storage(backend)
            self._local_storage.init()
        return self._local_storage

    @property
    def user_id(self):
        return self.session.get_user_id()

    def _call(self, remote, local):
        """Run `remote`, or `local` against the local store once in fallback mode."""
        if not self.use_local_storage:
            try:
                return remote()
            except ApiError as e:
                logger.warning(f"API call failed, switching to local storage: {e.message}")
                self.use_local_storage = True
        return local(self.local_storage)

    def _require_user(self):
        user_id = self.user_id
        if not user_id:
            raise RuntimeError("No user is logged in")
        return user_id

    # Session
    def login(self, identifier, password):
        result = self.api.login(identifier, password)
        self.user = result['user']
        self.session.set_user_id(self.user['id'])
        return self.user

    def signup(self, username, email, password):
        result = self.api.signup(username, email, password)
        self.user = result['user']
        self.session.set_user_id(self.user['id'])
        return self.user

    def logout(self):
        self.session.clear()
        self._reset_cache()
        if self.scheduler:
            self.scheduler.clear_all()

    # Loading
    def load(self):
        """Fetch everything for the logged-in user into the cache."""
        user_id = self._require_user()

        self.profile = self._call(
            lambda: self.api.get_profile(user_id),
            lambda storage: records_service.get_or_create_profile(storage, user_id),
        )
        self.settings = self._call(
            lambda: self.api.get_settings(user_id),
            lambda storage: records_service.get_settings(storage, user_id),
        )
        self.health_data = self._call(
            lambda: self.api.get_health_data(user_id),
            lambda storage: records_service.get_health_data(storage, user_id),
        )
        self.appointments = self._list(APPOINTMENTS, user_id)
        self.medications = self._list(MEDICATIONS, user_id)
        self.documents = self._list(DOCUMENTS, user_id)

        self.reschedule_reminders()
        logger.info(f"Loaded data for user {user_id} (local storage: {self.use_local_storage})")

    def _list(self, collection, user_id):
        return self._call(
            lambda: self.api.list_records(collection, user_id),
            lambda storage: records_service.list_records(storage, collection, user_id),
        )

    def _save(self, collection, items):
        user_id = self._require_user()
        counts = self._call(
            lambda: self.api.batch_update(collection, user_id, items),
            lambda storage: records_service.batch_update(storage, collection, user_id, items),
        )
        return counts, self._list(collection, user_id)

    # Updates
    def update_profile(self, profile):
        profile = {**profile, 'id': self._require_user()}
        self.profile = self._call(
            lambda: self.api.update_profile(profile),
            lambda storage: records_service.update_profile(storage, profile),
        )
        return self.profile

    def update_settings(self, user_settings):
        user_id = self._require_user()
        self.settings = self._call(
            lambda: self.api.update_settings(user_id, user_settings),
            lambda storage: records_service.update_settings(storage, user_id, user_settings),
        )
        self.reschedule_reminders()
        return self.settings

    def add_health_reading(self, metric, reading):
        user_id = self._require_user()
        self.health_data = self._call(
            lambda: self.api.add_health_reading(user_id, metric, reading),
            lambda storage: records_service.add_health_reading(storage, user_id, metric, reading),
        )
        return self.health_data

    def save_appointments(self, appointments):
        counts, self.appointments = self._save(APPOINTMENTS, appointments)
        return counts

    def save_medications(self, medications):
        counts, self.medications = self._save(MEDICATIONS, medications)
        self.reschedule_reminders()
        return counts

    def save_documents(self, documents):
        counts, self.documents = self._save(DOCUMENTS, documents)
        return counts

    def reschedule_reminders(self):
        """Re-arm reminders from the cached medications, or clear them if muted."""
        if not self.scheduler:
            return 0
        notifications = (self.settings or {}).get('notifications', {})
        if not notifications.get('medications', True):
            self.scheduler.clear_all()
            return 0
        return self.scheduler.schedule(self.medications)
