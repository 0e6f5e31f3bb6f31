"""
Profile Routes

Profile, settings, health data and CSV export for a single user.
"""

from flask import Blueprint, Response, jsonify, request

from webapp.context import get_storage, get_json_body, require_user_id
from webapp.errors import ValidationError
from webapp.services import records_service
from utils.export import export_to_csv
from utils.profile import calculate_profile_completion

bp = Blueprint('profile', __name__, url_prefix='/api')


@bp.route('/profile', methods=['GET'])
def get_profile():
    user_id = require_user_id()
    return jsonify(records_service.get_or_create_profile(get_storage(), user_id))


@bp.route('/profile', methods=['PUT'])
def put_profile():
    return jsonify(records_service.update_profile(get_storage(), get_json_body()))


@bp.route('/profile/completion', methods=['GET'])
def profile_completion():
    user_id = require_user_id()
    profile = records_service.get_or_create_profile(get_storage(), user_id)
    return jsonify({'completion': calculate_profile_completion(profile)})


@bp.route('/settings', methods=['GET'])
def get_settings():
    user_id = require_user_id()
    return jsonify(records_service.get_settings(get_storage(), user_id))


@bp.route('/settings', methods=['PUT'])
def put_settings():
    payload = get_json_body()
    user_id = request.args.get('userId') or payload.get('userId')
    if not user_id:
        raise ValidationError("User ID is required")
    settings = payload.get('settings', payload)
    return jsonify(records_service.update_settings(get_storage(), user_id, settings))


@bp.route('/health-data', methods=['GET'])
def get_health_data():
    user_id = require_user_id()
    return jsonify(records_service.get_health_data(get_storage(), user_id))


@bp.route('/health-data', methods=['PUT'])
def put_health_data():
    payload = get_json_body()
    user_id = request.args.get('userId') or payload.get('userId')
    if not user_id:
        raise ValidationError("User ID is required")
    data = payload.get('healthData', payload)
    return jsonify(records_service.update_health_data(get_storage(), user_id, data))


@bp.route('/health-data/readings', methods=['POST'])
def add_reading():
    payload = get_json_body()
    if not payload.get('userId') or not payload.get('metric'):
        raise ValidationError("User ID and metric are required")
    data = records_service.add_health_reading(
        get_storage(), payload['userId'], payload['metric'], payload.get('reading')
    )
    return jsonify(data)


@bp.route('/export', methods=['GET'])
def export_csv():
    user_id = require_user_id()
    data = records_service.collect_user_data(get_storage(), user_id)
    return Response(
        export_to_csv(data),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename=health-data-{user_id}.csv'},
    )
