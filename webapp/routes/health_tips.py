"""
Health Tips Routes
"""

from datetime import datetime
from flask import Blueprint, current_app, jsonify, request

from webapp.context import get_storage, require_user_id
from webapp.services import health_tips
from utils.date_converter import get_timezone

bp = Blueprint('health_tips', __name__, url_prefix='/api/health-tips')


@bp.route('/search', methods=['GET'])
def search():
    today = datetime.now(get_timezone(current_app.config['TIMEZONE']))
    return jsonify(health_tips.search_tips(request.args.get('q', ''), today=today))


@bp.route('/personalized', methods=['GET'])
def personalized():
    user_id = require_user_id()
    return jsonify(health_tips.personalized_tips(get_storage(), user_id))
