"""
Client Session

Keeps the logged-in user's id in a small JSON file under the client
directory. The id is the whole session: there is no token or expiry.
"""

import json
import logging
from pathlib import Path

from config import settings

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, path=None):
        self.path = Path(path) if path else settings.CLIENT_DIR / "session.json"

    def get_user_id(self):
        if not self.path.exists():
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None
        return data.get('userId') if isinstance(data, dict) else None

    def set_user_id(self, user_id):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump({'userId': user_id}, f)
        logger.info(f"Session started for user {user_id}")

    def clear(self):
        if self.path.exists():
            self.path.unlink()
            logger.info("Session cleared")
