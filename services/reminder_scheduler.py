"""
Medication Reminder Scheduler

Keeps one one-shot timer per (medication, "HH:MM") pair. When a timer fires
it plays the reminder sound, shows the notification and re-arms itself for
the next day's occurrence of the same time, drawn from a lazy daily
sequence. Rescheduling always starts by cancelling every outstanding timer.

Timer state is mirrored to a JSON file for debugging only; a restart
schedules afresh from the current medication list.
"""

import json
import logging
import threading
from datetime import datetime, time, timedelta
from pathlib import Path

from config import settings
from utils.date_converter import get_timezone, parse_iso, parse_reminder_time, to_iso

logger = logging.getLogger(__name__)


def daily_occurrences(reminder_time, start, tz):
    """
    Yield every daily occurrence of an "HH:MM" time at or after `start`.

    The sequence is infinite; restart it by calling the function again.

    Args:
        reminder_time (str): 24h time, e.g. "08:00"
        start (datetime): Aware datetime the sequence starts from
        tz (pytz timezone): Zone the time of day is interpreted in
    """
    hours, minutes = parse_reminder_time(reminder_time)
    start = start.astimezone(tz)
    day = start.date()
    while True:
        occurrence = tz.localize(datetime.combine(day, time(hours, minutes)))
        if occurrence >= start:
            yield occurrence
        day += timedelta(days=1)


def next_occurrence(reminder_time, now, tz):
    """Today's occurrence if it has not passed yet, otherwise tomorrow's."""
    return next(daily_occurrences(reminder_time, now, tz))


class ScheduledReminder:
    """An armed timer for one medication reminder time."""

    def __init__(self, medication, reminder_time, occurrences):
        self.medication = medication
        self.reminder_time = reminder_time
        self.occurrences = occurrences
        self.fire_at = None
        self.timer = None

    def to_dict(self):
        return {
            'medicationId': self.medication.get('id'),
            'name': self.medication.get('name'),
            'time': self.reminder_time,
            'fireAt': to_iso(self.fire_at) if self.fire_at else None,
        }


class ReminderScheduler:
    """
    Schedules medication reminders on timer threads.

    Args:
        notifier (Notifier): Plays the sound and shows notifications
        tz (tzinfo, optional): Zone reminder times are read in (default: AFIA_TIMEZONE)
        clock (callable, optional): Returns the current aware datetime
        timer_factory (callable, optional): Builds a timer from (delay, function, args=...)
        mirror_path (str or Path, optional): JSON file listing armed reminders
        recipient_lookup (callable, optional): Maps a medication to an email address
    """

    def __init__(self, notifier, tz=None, clock=None, timer_factory=threading.Timer,
                 mirror_path=None, recipient_lookup=None):
        self.notifier = notifier
        self.tz = tz or get_timezone(settings.TIMEZONE)
        self.clock = clock or (lambda: datetime.now(self.tz))
        self.timer_factory = timer_factory
        self.mirror_path = Path(mirror_path) if mirror_path else None
        self.recipient_lookup = recipient_lookup
        self._reminders = []
        self._lock = threading.Lock()

    @property
    def scheduled(self):
        with self._lock:
            return list(self._reminders)

    def now(self):
        return self.clock().astimezone(self.tz)

    def is_active(self, medication, now):
        """A medication is active if reminders are on and it has not ended."""
        if not medication.get('reminderEnabled') or not medication.get('reminderTimes'):
            return False

        end_date = medication.get('endDate')
        if end_date:
            try:
                ends_at = parse_iso(end_date, self.tz)
            except ValueError as e:
                logger.warning(f"Skipping medication {medication.get('id')} with bad end date: {e}")
                return False
            if ends_at < now:
                return False
        return True

    def schedule(self, medications):
        """
        Cancel all reminders, then arm one timer per active reminder time.

        Returns:
            int: Number of timers armed
        """
        self.clear_all()
        now = self.now()

        armed = []
        for medication in medications:
            if not self.is_active(medication, now):
                continue

            for reminder_time in medication['reminderTimes']:
                try:
                    parse_reminder_time(reminder_time)
                except ValueError as e:
                    logger.warning(f"Skipping reminder for medication {medication.get('id')}: {e}")
                    continue

                occurrences = daily_occurrences(reminder_time, now, self.tz)
                reminder = ScheduledReminder(medication, reminder_time, occurrences)
                # Registered before the timer starts; a zero delay fires at once
                with self._lock:
                    self._reminders.append(reminder)
                    self._arm(reminder, next(occurrences), now)
                armed.append(reminder)

        self._write_mirror()
        logger.info(f"Scheduled {len(armed)} medication reminders")
        return len(armed)

    def restore(self, medications):
        """Rebuild every timer from the current medication list."""
        return self.schedule(medications)

    def clear_all(self):
        """Cancel every outstanding timer."""
        with self._lock:
            reminders, self._reminders = self._reminders, []

        for reminder in reminders:
            reminder.timer.cancel()

        if reminders:
            logger.info(f"Cleared {len(reminders)} scheduled reminders")
        self._write_mirror()

    def _arm(self, reminder, fire_at, now):
        delay = max((fire_at - now).total_seconds(), 0)
        timer = self.timer_factory(delay, self._fire, args=(reminder,))
        timer.daemon = True
        reminder.fire_at = fire_at
        reminder.timer = timer
        timer.start()
        logger.debug(f"Reminder for {reminder.medication.get('name')} at {reminder.reminder_time} fires in {delay:.0f}s")

    def _fire(self, reminder):
        with self._lock:
            if reminder not in self._reminders:
                return

        medication = reminder.medication
        try:
            self.notifier.play_sound()
            recipient = self.recipient_lookup(medication) if self.recipient_lookup else None
            self.notifier.notify_medication(medication, recipient)
        finally:
            now = self.now()
            fire_at = next(reminder.occurrences)
            while fire_at <= now:
                fire_at = next(reminder.occurrences)

            with self._lock:
                if reminder in self._reminders:
                    self._arm(reminder, fire_at, now)
            self._write_mirror()

    def _write_mirror(self):
        if not self.mirror_path:
            return
        try:
            self.mirror_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.mirror_path, 'w', encoding='utf-8') as f:
                json.dump([r.to_dict() for r in self.scheduled], f, indent=2)
        except OSError as e:
            logger.warning(f"Could not mirror scheduled reminders to {self.mirror_path}: {e}")
