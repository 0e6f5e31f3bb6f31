"""
Background services: medication reminders and notifications.
"""
