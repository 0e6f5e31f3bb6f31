"""
API Errors

Exceptions raised by the services and turned into `{"error": ...}` JSON
responses by the handlers registered in the app factory.
"""

import logging
from flask import jsonify
from werkzeug.exceptions import HTTPException

from config.database import StoreError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    status_code = 400


class AuthError(ApiError):
    status_code = 401


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


def require_fields(payload, *names, message=None):
    """
    Raise ValidationError unless every named field is present and non-empty.
    """
    missing = [name for name in names if payload.get(name) in (None, "")]
    if missing:
        raise ValidationError(message or f"Missing required fields: {', '.join(missing)}")


def register_error_handlers(app):
    """Attach JSON error handlers to the Flask app."""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify({'error': error.message}), error.status_code

    @app.errorhandler(StoreError)
    def handle_store_error(error):
        logger.error(f"Store failure: {error}")
        return jsonify({'error': 'Internal server error'}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.error(f"Unhandled error: {error}", exc_info=True)
        return jsonify({'error': 'Internal server error'}), 500
