"""
Request context helpers.
"""

from flask import current_app, request

from webapp.errors import ValidationError

STORAGE_EXTENSION = "afiatrack.storage"


def get_storage():
    return current_app.extensions[STORAGE_EXTENSION]


def get_json_body():
    """The request body as a dict, or a 400 if it is not a JSON object."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def require_user_id():
    user_id = request.args.get('userId')
    if not user_id:
        raise ValidationError("User ID is required")
    return user_id
