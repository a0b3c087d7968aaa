"""
Configuration routes: Apps Script link, AI key and overall status.
"""
from flask import Blueprint, request, jsonify

from backend.routes.helpers import get_session, bad_request

config_bp = Blueprint('config', __name__)


@config_bp.route('/api/status')
def get_status():
    """Configuration state, AI readiness and roster size."""
    return jsonify(get_session().status())


@config_bp.route('/api/config', methods=['GET'])
def get_config():
    session = get_session()
    data = session.config_store.current.to_dict()
    data["needs_configuration"] = session.needs_configuration()
    return jsonify(data)


@config_bp.route('/api/config', methods=['POST'])
def save_config():
    """Save the Apps Script link (and optionally the AI key), then sync the roster."""
    data = request.get_json(silent=True) or {}
    if 'endpoint_url' not in data:
        return bad_request("endpoint_url is required.")

    session = get_session()
    saved = session.save_configuration(data.get('endpoint_url', ''), data.get('ai_credential'))
    result = saved.to_dict()
    result["needs_configuration"] = session.needs_configuration()
    result["status"] = session.status()
    return jsonify(result)


@config_bp.route('/api/ai/connect', methods=['POST'])
def connect_ai():
    """Store a new AI key and re-check whether drafting is available."""
    data = request.get_json(silent=True) or {}
    credential = (data.get('ai_credential') or '').strip()
    if not credential:
        return bad_request("ai_credential is required.")

    ready = get_session().connect_ai(credential)
    return jsonify({"ai_ready": ready})


@config_bp.route('/api/notification')
def get_notification():
    """Latest banner message, or null once it has expired."""
    note = get_session().notification
    return jsonify({"notification": note.to_dict() if note else None})
