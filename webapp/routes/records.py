"""
Record Routes

Listing and batch reconciliation for appointments, medications and documents.
"""

from flask import Blueprint, jsonify

from webapp.context import get_storage, get_json_body, require_user_id
from webapp.services import records_service

bp = Blueprint('records', __name__, url_prefix='/api')

COLLECTION_PATTERN = '<any(appointments, medications, documents):collection>'


@bp.route(f'/{COLLECTION_PATTERN}', methods=['GET'])
def list_records(collection):
    user_id = require_user_id()
    return jsonify(records_service.list_records(get_storage(), collection, user_id))


@bp.route(f'/{COLLECTION_PATTERN}/batch', methods=['POST'])
def batch_update(collection):
    payload = get_json_body()
    items = payload.get('items', payload.get(collection))
    counts = records_service.batch_update(get_storage(), collection, payload.get('userId'), items)
    return jsonify({'success': True, **counts})
