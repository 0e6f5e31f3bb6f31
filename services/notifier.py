"""
Notification Module

Handles the alerts a medication reminder raises:
- Audio alert (best-effort, retried once with a fresh sound handle)
- Notification delivery (logged, and emailed when a recipient is known)
"""

import logging
from playsound3 import playsound

from webapp.services import email_service

logger = logging.getLogger(__name__)


class Notifier:
    """
    Delivers reminder notifications.

    Args:
        sound_path (str, optional): Sound file played when a reminder fires
        permission_granted (bool): Whether notifications may be shown at all
        player (callable, optional): Sound player taking (path, block=...)
        email_sender (callable, optional): Sender taking (recipient, title, body)
    """

    def __init__(self, sound_path=None, permission_granted=True, player=None, email_sender=None):
        self.sound_path = sound_path
        self.permission_granted = permission_granted
        self._player = player or playsound
        self._email_sender = email_sender or email_service.send_medication_reminder

    def play_sound(self):
        """
        Play the notification sound without blocking.

        Returns:
            bool: True if the sound started on the first or the retry attempt
        """
        if not self.sound_path:
            return False

        try:
            self._player(self.sound_path, block=False)
            return True
        except Exception as e:
            logger.warning(f"Could not play notification sound, retrying with a new handle: {e}")

        try:
            self._player(self.sound_path, block=False)
            return True
        except Exception as e:
            logger.error(f"Failed to play notification sound: {e}")
            return False

    def notify(self, title, body, tag, recipient=None):
        """
        Show a notification if permission was granted.

        Returns:
            bool: True if the notification was shown
        """
        if not self.permission_granted:
            logger.warning("Notifications not permitted, skipping")
            return False

        logger.info(f"[{tag}] {title} - {body}")
        if recipient:
            self._email_sender(recipient, title, body)
        return True

    def notify_medication(self, medication, recipient=None):
        title = f"Time to take {medication.get('name')}"
        body = f"Dosage: {medication.get('dosage')}\nInstructions: {medication.get('instructions') or 'None'}"
        return self.notify(title, body, f"medication-{medication.get('id')}", recipient)
