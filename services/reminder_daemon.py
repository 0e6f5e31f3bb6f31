"""
Reminder Daemon

Background service that schedules medication reminders for every user
who has medication notifications switched on, and re-reads the store
periodically so new or edited medications get picked up.
"""

import sys
import json
import time
import logging
import signal
from pathlib import Path
from dotenv import load_dotenv

# Load env vars
load_dotenv()

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from config import settings
from config.database import create_storage
from config.models import MEDICATIONS, SETTINGS, USERS
from services.notifier import Notifier
from services.reminder_scheduler import ReminderScheduler
from utils.date_converter import get_timezone

logger = logging.getLogger(__name__)

# Global flag for graceful shutdown
running = True


def signal_handler(signum, frame):
    """Handle shutdown signals gracefully."""
    global running
    logger.info("Received shutdown signal. Stopping gracefully...")
    running = False


def medications_notifications_on(storage, user_id):
    user_settings = storage.records(SETTINGS).get_single(user_id)
    if not user_settings:
        return True
    return user_settings.get('notifications', {}).get('medications', True)


def load_reminder_medications(storage):
    """
    Collect the medications whose owners allow medication notifications.

    Returns:
        list: Medication records across all users
    """
    medications = []
    for medication in storage.records(MEDICATIONS).all():
        if medications_notifications_on(storage, medication.get('userId')):
            medications.append(medication)
    return medications


def email_lookup(storage):
    """Build a recipient lookup mapping a medication to its owner's email."""
    def lookup(medication):
        user = storage.records(USERS).find(lambda u: u.get('id') == medication.get('userId'))
        return user.get('email') if user else None
    return lookup


def build_scheduler(storage, config):
    notifier = Notifier(
        sound_path=settings.REMINDER_SOUND,
        permission_granted=settings.NOTIFICATIONS_ENABLED,
    )
    return ReminderScheduler(
        notifier,
        tz=get_timezone(config["TIMEZONE"]),
        mirror_path=Path(config["DATA_DIR"]) / "scheduled_reminders.json",
        recipient_lookup=email_lookup(storage),
    )


def main():
    """
    Main daemon loop.
    Reschedules reminders whenever the stored medications change.
    """
    global running

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler("reminder_daemon.log"), logging.StreamHandler()],
    )

    # Register signal handlers
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    logger.info("Starting Reminder Daemon")
    logger.info("Press Ctrl+C to stop")

    config = settings.get_app_config()
    storage = create_storage(config)
    storage.init()
    scheduler = build_scheduler(storage, config)

    cycle_count = 0
    fingerprint = None

    try:
        while running:
            cycle_count += 1
            logger.info(f"=== Reminder Refresh #{cycle_count} ===")

            try:
                medications = load_reminder_medications(storage)
                current = json.dumps(medications, sort_keys=True)
                if current != fingerprint:
                    scheduler.schedule(medications)
                    fingerprint = current
                else:
                    logger.info("Medications unchanged, keeping existing reminders")
            except Exception as e:
                logger.error(f"Error refreshing reminders: {e}", exc_info=True)

            if running:
                logger.info(f"Waiting {settings.REMINDER_REFRESH_SECONDS} seconds before next refresh...")
                # Check every second if we should stop (allows responsive shutdown)
                for _ in range(settings.REMINDER_REFRESH_SECONDS):
                    if not running:
                        break
                    time.sleep(1)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        scheduler.clear_all()
        logger.info("Reminder Daemon stopped")


if __name__ == "__main__":
    main()
