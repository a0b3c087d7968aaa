"""
Evaluation routes: open, edit, AI-draft, submit and close the current draft.
"""
from flask import Blueprint, request, jsonify

from backend.evaluation import Phase
from backend.routes.helpers import get_session, bad_request
from backend.errors import NoOpenDraft

evaluation_bp = Blueprint('evaluation', __name__)


@evaluation_bp.route('/api/evaluations', methods=['POST'])
def open_evaluation():
    data = request.get_json(silent=True) or {}
    missing = [k for k in ('grade', 'class_name', 'student_name', 'phase') if not data.get(k)]
    if missing:
        return bad_request("Missing fields: " + ", ".join(missing))
    try:
        phase = Phase.parse(data['phase'])
    except ValueError:
        return bad_request("phase must be 'Before Session' or 'After Session'.")

    draft = get_session().open_evaluation(
        str(data['grade']), data['class_name'], data['student_name'], phase
    )
    return jsonify(draft.to_dict()), 201


@evaluation_bp.route('/api/evaluations/current', methods=['GET'])
def get_current():
    draft = get_session().current_draft
    if draft is None:
        raise NoOpenDraft()
    return jsonify(draft.to_dict())


@evaluation_bp.route('/api/evaluations/current', methods=['PATCH'])
def edit_current():
    data = request.get_json(silent=True) or {}
    for key in ('score_or_label', 'comment'):
        value = data.get(key)
        if value is not None and (isinstance(value, bool) or not isinstance(value, (str, int, float))):
            return bad_request(f"{key} must be text or a number.")
    draft = get_session().edit_evaluation(
        score_or_label=data.get('score_or_label'),
        comment=data.get('comment'),
    )
    return jsonify(draft.to_dict())


@evaluation_bp.route('/api/evaluations/current', methods=['DELETE'])
def close_current():
    get_session().close_evaluation()
    return jsonify({"closed": True})


@evaluation_bp.route('/api/evaluations/current/ai-draft', methods=['POST'])
def ai_draft_current():
    """Fill the comment with an AI suggestion. Stale suggestions are dropped."""
    session = get_session()
    text = session.draft_comment()
    return jsonify({
        "applied": text is not None,
        "comment": text,
        "draft": session.current_draft.to_dict() if session.current_draft else None,
    })


@evaluation_bp.route('/api/evaluations/current/submit', methods=['POST'])
def submit_current():
    draft = get_session().submit_evaluation()
    return jsonify(draft.to_dict())
