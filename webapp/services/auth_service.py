"""
Authentication Service

Login, signup and password management over the users collection.

Passwords are stored and compared as plain strings and reset codes are
handed back to the caller. Both are demo shortcuts, not a security design.
"""

import logging
import secrets
import uuid
from datetime import timedelta

from config.models import USERS, PROFILES, SETTINGS, VERIFICATION_CODES, PASSWORD_RESET, default_settings
from webapp.errors import ValidationError, AuthError, NotFoundError, ConflictError, require_fields
from webapp.services import email_service
from webapp.services.seed_service import generate_demo_data
from utils.date_converter import now_utc, to_iso, parse_iso

logger = logging.getLogger(__name__)

RESET_CODE_TTL_MINUTES = 15


def public_user(user):
    """User fields that are safe to return to the client."""
    return {'id': user['id'], 'username': user['username'], 'email': user['email']}


def find_user(storage, identifier):
    """Find a user whose email or username equals the identifier exactly."""
    return storage.records(USERS).find(
        lambda u: u.get('email') == identifier or u.get('username') == identifier
    )


def find_user_by_id(storage, user_id):
    return storage.records(USERS).find(lambda u: u.get('id') == user_id)


def find_user_by_phone(storage, phone):
    profile = storage.records(PROFILES).find(lambda p: p.get('phone') == phone)
    if not profile:
        return None
    return find_user_by_id(storage, profile.get('id'))


def login(storage, identifier, password):
    """
    Check credentials and return the public user fields.

    Raises:
        ValidationError: If identifier or password is missing
        AuthError: If no user matches or the password differs
    """
    if not identifier or not password:
        raise ValidationError("Email or username and password are required")

    user = find_user(storage, identifier)
    if not user or user.get('password') != password:
        logger.info(f"Failed login attempt for '{identifier}'")
        raise AuthError("Invalid credentials")

    logger.info(f"User {user['id']} logged in")
    return public_user(user)


def signup(storage, username, email, password, seed_demo_data=True, now=None):
    """
    Create credentials, profile, default settings and demo data.

    Raises:
        ValidationError: If a field is missing
        ConflictError: If the email or username is already taken
    """
    if not username or not email or not password:
        raise ValidationError("Username, email, and password are required")

    users = storage.records(USERS)
    if users.find(lambda u: u.get('email') == email):
        raise ConflictError("Email already exists")
    if users.find(lambda u: u.get('username') == username):
        raise ConflictError("Username already exists")

    now = now or now_utc()
    user = {
        'id': str(uuid.uuid4()),
        'username': username,
        'email': email,
        'password': password,
        'createdAt': to_iso(now),
    }
    users.put(user)
    storage.records(PROFILES).put({'id': user['id'], 'name': username, 'email': email})
    storage.records(SETTINGS).put_single(user['id'], default_settings(user['id']))

    if seed_demo_data:
        generate_demo_data(storage, user['id'], now=now)

    logger.info(f"Created user {user['id']} ({email})")
    return public_user(user)


def generate_reset_code():
    return str(100000 + secrets.randbelow(900000))


def create_verification_code(storage, user_id, ttl_minutes=RESET_CODE_TTL_MINUTES, now=None):
    """
    Store a fresh password reset code, replacing any earlier one for the user.

    Returns:
        dict: The stored verification code record
    """
    now = now or now_utc()
    record = {
        'userId': user_id,
        'code': generate_reset_code(),
        'expiresAt': to_iso(now + timedelta(minutes=ttl_minutes)),
        'type': PASSWORD_RESET,
    }

    store = storage.records(VERIFICATION_CODES)
    codes = [
        c for c in store.all()
        if not (c.get('userId') == user_id and c.get('type') == PASSWORD_RESET)
    ]
    codes.append(record)
    store.replace_all(codes)
    return record


def verify_code(storage, user_id, code, code_type=PASSWORD_RESET, now=None):
    """
    Check a verification code and consume it.

    Returns:
        bool: True if a matching unexpired code existed
    """
    now = now or now_utc()
    store = storage.records(VERIFICATION_CODES)
    codes = store.all()

    match = next((
        c for c in codes
        if c.get('userId') == user_id and c.get('code') == code and c.get('type') == code_type
        and parse_iso(c.get('expiresAt')) > now
    ), None)
    if not match:
        return False

    store.replace_all([
        c for c in codes
        if not (c.get('userId') == user_id and c.get('type') == code_type)
    ])
    return True


def forgot_password(storage, email=None, phone=None, method=None,
                    ttl_minutes=RESET_CODE_TTL_MINUTES, now=None):
    """
    Issue a password reset code for the account behind an email or phone.

    The code is returned in the response; emailing it is best-effort.

    Raises:
        ValidationError: If the method is unknown or its field is missing
        NotFoundError: If no account matches
    """
    method = method or ('phone' if phone and not email else 'email')

    if method == 'email':
        if not email:
            raise ValidationError("Email is required")
        user = storage.records(USERS).find(lambda u: u.get('email') == email)
    elif method == 'phone':
        if not phone:
            raise ValidationError("Phone number is required")
        user = find_user_by_phone(storage, phone)
    else:
        raise ValidationError("Invalid method")

    if not user:
        if method == 'email':
            raise NotFoundError("No account found with this email")
        raise NotFoundError("No account found with this phone number")

    record = create_verification_code(storage, user['id'], ttl_minutes=ttl_minutes, now=now)
    if method == 'email':
        email_service.send_password_reset_code(user['email'], record['code'], ttl_minutes)

    logger.info(f"Issued password reset code for user {user['id']}")
    return {
        'success': True,
        'userId': user['id'],
        'code': record['code'],
        'expiresAt': record['expiresAt'],
        'message': f"Verification code sent to your {'email' if method == 'email' else 'phone'}",
    }


def update_password(storage, user_id, new_password):
    users = storage.records(USERS)
    user = users.find(lambda u: u.get('id') == user_id)
    if not user:
        return False
    users.put({**user, 'password': new_password})
    return True


def reset_password(storage, user_id, code, new_password, now=None):
    require_fields({'userId': user_id, 'code': code, 'newPassword': new_password},
                   'userId', 'code', 'newPassword',
                   message="User ID, code, and new password are required")

    if not verify_code(storage, user_id, code, now=now):
        raise AuthError("Invalid or expired verification code")
    if not update_password(storage, user_id, new_password):
        raise NotFoundError("User not found")

    logger.info(f"Password reset for user {user_id}")
    return {'success': True, 'message': "Password updated successfully"}


def change_password(storage, user_id, current_password, new_password):
    require_fields({'userId': user_id, 'currentPassword': current_password, 'newPassword': new_password},
                   'userId', 'currentPassword', 'newPassword',
                   message="User ID, current password, and new password are required")

    user = find_user_by_id(storage, user_id)
    if not user:
        raise NotFoundError("User not found")
    if user.get('password') != current_password:
        raise AuthError("Current password is incorrect")

    update_password(storage, user_id, new_password)
    logger.info(f"Password changed for user {user_id}")
    return {'success': True}
