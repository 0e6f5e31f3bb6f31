"""
Email Service

Sends password-reset codes and medication reminders by email. Delivery is
best-effort: without SMTP credentials every send returns False.
"""

import smtplib
import os
import logging
from email.mime.text import MIMEText
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Email configuration from environment
SMTP_SERVER = os.getenv("SMTP_SERVER", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SENDER_EMAIL = os.getenv("SENDER_EMAIL")
SENDER_PASSWORD = os.getenv("SENDER_PASSWORD")


def is_configured():
    return bool(SENDER_EMAIL and SENDER_PASSWORD)


def _send(user_email, subject, body):
    if not is_configured():
        logger.warning("Email credentials not configured. Set SENDER_EMAIL and SENDER_PASSWORD environment variables.")
        return False

    message = MIMEText(body, "plain")
    message["From"] = SENDER_EMAIL
    message["To"] = user_email
    message["Subject"] = subject

    try:
        with smtplib.SMTP(SMTP_SERVER, SMTP_PORT) as server:
            server.starttls()
            server.login(SENDER_EMAIL, SENDER_PASSWORD)
            server.send_message(message)

        logger.info(f"Email '{subject}' sent to {user_email}")
        return True

    except smtplib.SMTPException as e:
        logger.error(f"SMTP error sending email to {user_email}: {e}")
        return False
    except OSError as e:
        logger.error(f"Error sending email to {user_email}: {e}")
        return False


def send_password_reset_code(user_email, code, ttl_minutes):
    """
    Email a password reset code.

    Args:
        user_email (str): Recipient email address
        code (str): 6-digit verification code
        ttl_minutes (int): Minutes until the code expires

    Returns:
        bool: True if email sent successfully, False otherwise
    """
    subject = "AfiaTrack password reset code"
    body = f"""Hello!

Your AfiaTrack verification code is {code}.

The code expires in {ttl_minutes} minutes. If you did not ask to reset your
password you can ignore this email.

---
This is an automated notification. Please do not reply to this email.
"""
    return _send(user_email, subject, body)


def send_medication_reminder(user_email, title, body):
    """Email a medication reminder that fired."""
    return _send(user_email, title, f"{body}\n\n---\nSent by AfiaTrack medication reminders.\n")
