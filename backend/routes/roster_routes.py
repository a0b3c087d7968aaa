"""
Roster routes: sync from the spreadsheet and browse grade -> class -> group.
"""
from flask import Blueprint, request, jsonify

from backend.config import OTHER_GROUP
from backend.routes.helpers import get_session

roster_bp = Blueprint('roster', __name__)


@roster_bp.route('/api/roster/refresh', methods=['POST'])
def refresh_roster():
    data = request.get_json(silent=True) or {}
    count = get_session().refresh_roster(silent=bool(data.get('silent')))
    return jsonify({"student_count": count})


@roster_bp.route('/api/grades')
def list_grades():
    return jsonify({"grades": get_session().directory.grades()})


@roster_bp.route('/api/grades/<grade>/classes')
def list_classes(grade):
    return jsonify({
        "grade": grade,
        "classes": get_session().directory.classes_for_grade(grade),
    })


@roster_bp.route('/api/grades/<grade>/classes/<class_name>/groups')
def list_groups(grade, class_name):
    """Students of one class, bucketed by group (groups in name order, ungrouped last)."""
    grouped = get_session().directory.grouped_by_cohort(grade, class_name)
    return jsonify({
        "grade": grade,
        "class_name": class_name,
        "groups": [
            {
                "name": OTHER_GROUP if name is None else name,
                "ungrouped": name is None,
                "students": [s.to_dict() for s in students],
            }
            for name, students in grouped.items()
        ],
    })
