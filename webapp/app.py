"""
Flask Application Factory

Creates and configures the AfiaTrack API application.
"""

import logging
from datetime import datetime
from flask import Flask, jsonify

from config.database import create_storage
from config.settings import get_app_config
from webapp.context import STORAGE_EXTENSION, get_storage
from webapp.errors import register_error_handlers
from webapp.routes import auth, profile, records, health_tips
from utils.date_converter import get_timezone

logger = logging.getLogger(__name__)


def create_app(config_overrides=None, storage=None):
    """
    Create and configure the Flask application.

    Args:
        config_overrides (dict, optional): Values replacing the environment config
        storage (Storage, optional): Pre-built storage; built from config if omitted

    Returns:
        Flask: Configured application

    Raises:
        ValueError: If TIMEZONE is not a known timezone
    """
    app = Flask(__name__)
    app.config.from_mapping(get_app_config(config_overrides))
    get_timezone(app.config['TIMEZONE'])

    if storage is None:
        storage = create_storage(app.config)
        storage.init()
    app.extensions[STORAGE_EXTENSION] = storage

    register_error_handlers(app)
    for blueprint in (auth.bp, profile.bp, records.bp, health_tips.bp):
        app.register_blueprint(blueprint)

    @app.route('/api/status')
    def status():
        """Health check endpoint."""
        get_storage().records('users').all()
        return jsonify({
            'status': 'ok',
            'timestamp': datetime.now().isoformat()
        })

    @app.route('/')
    def home():
        return jsonify({'message': 'AfiaTrack API is running'})

    logger.info(f"AfiaTrack app created with {app.config['STORAGE_BACKEND']} storage")
    return app
