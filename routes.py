import logging
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from sessions import load_session, save_session

logger = logging.getLogger(__name__)

bp = Blueprint('whiteboard', __name__)


@bp.route('/')
def index():
    return 'Backend is running'


@bp.route('/health')
def health_check():
    """Health check endpoint for k8s and monitoring"""
    try:
        db.session.execute(text('SELECT 1'))
        database_ok = True
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        database_ok = False

    presence = current_app.extensions['whiteboard.presence']
    if presence is None:
        presence_status = 'disabled'
    else:
        presence_status = 'connected' if presence.ping() else 'disconnected'

    return jsonify({
        'status': 'healthy' if database_ok else 'unhealthy',
        'database': 'connected' if database_ok else 'disconnected',
        'presence': presence_status,
        'timestamp': datetime.now(timezone.utc).isoformat()
    }), 200 if database_ok else 503


@bp.route('/api/sessions/save', methods=['POST'])
def save():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    result = save_session(data.get('roomId'), data.get('userName'), data.get('imageData'))

    body = {
        'ok': True,
        'message': f"Session {result.action}",
        'action': result.action
    }
    if result.session_id is not None:
        body['sessionId'] = result.session_id
    return jsonify(body)


@bp.route('/api/sessions/<room_id>')
def load(room_id):
    session = load_session(room_id)
    return jsonify({'roomId': session.room_id, 'imageData': session.image_data})


@bp.route('/api/rooms/<room_id>/users')
def room_users(room_id):
    presence = current_app.extensions['whiteboard.presence']
    if presence is not None:
        users = presence.active_users(room_id)
    else:
        users = current_app.extensions['whiteboard.relay'].roster(room_id)
    return jsonify({'roomId': room_id, 'users': users})
