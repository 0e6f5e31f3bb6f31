"""
Authentication Routes

Login, signup, password reset and password change.
"""

from flask import Blueprint, current_app, jsonify, request

from webapp.context import get_storage, get_json_body, require_user_id
from webapp.services import auth_service
from webapp.services.records_service import user_exists

bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@bp.route('/login', methods=['POST'])
def login():
    payload = get_json_body()
    identifier = payload.get('emailOrUsername') or payload.get('email') or payload.get('username')
    user = auth_service.login(get_storage(), identifier, payload.get('password'))
    return jsonify({'success': True, 'user': user})


@bp.route('/signup', methods=['POST'])
def signup():
    payload = get_json_body()
    user = auth_service.signup(
        get_storage(),
        payload.get('username'),
        payload.get('email'),
        payload.get('password'),
        seed_demo_data=current_app.config.get('SEED_DEMO_DATA', True),
    )
    return jsonify({'success': True, 'user': user})


@bp.route('/forgot-password', methods=['POST'])
def forgot_password():
    payload = get_json_body()
    result = auth_service.forgot_password(
        get_storage(),
        email=payload.get('email'),
        phone=payload.get('phone'),
        method=payload.get('method'),
        ttl_minutes=current_app.config.get('RESET_CODE_TTL_MINUTES', auth_service.RESET_CODE_TTL_MINUTES),
    )
    return jsonify(result)


@bp.route('/reset-password', methods=['POST'])
def reset_password():
    payload = get_json_body()
    result = auth_service.reset_password(
        get_storage(), payload.get('userId'), payload.get('code'), payload.get('newPassword')
    )
    return jsonify(result)


@bp.route('/change-password', methods=['POST'])
def change_password():
    payload = get_json_body()
    result = auth_service.change_password(
        get_storage(), payload.get('userId'), payload.get('currentPassword'), payload.get('newPassword')
    )
    return jsonify(result)


@bp.route('/verify', methods=['GET'])
def verify():
    user_id = require_user_id()
    return jsonify({'exists': user_exists(get_storage(), user_id)})
