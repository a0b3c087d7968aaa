"""
Shared helpers for the notebook API blueprints.
"""
from flask import current_app, jsonify

from backend.errors import (
    InvalidEndpoint, InvalidCredential, TransportError, FormatError,
    EmptyDraftError, DraftStateError, StudentNotFound, NoOpenDraft,
    AiUnavailable, AiAuthError, AiQuotaExceeded, AiTransientError,
)

SESSION_KEY = "NOTEBOOK_SESSION"

# Most specific classes first
ERROR_STATUS = [
    (InvalidEndpoint, 400),
    (InvalidCredential, 400),
    (EmptyDraftError, 400),
    (StudentNotFound, 404),
    (NoOpenDraft, 404),
    (DraftStateError, 409),
    (AiQuotaExceeded, 429),
    (AiUnavailable, 503),
    (AiAuthError, 502),
    (AiTransientError, 502),
    (TransportError, 502),
    (FormatError, 502),
]


def get_session():
    """The NotebookSession attached to the running app."""
    return current_app.config[SESSION_KEY]


def status_for(error) -> int:
    for error_cls, status in ERROR_STATUS:
        if isinstance(error, error_cls):
            return status
    return 500


def error_response(error):
    return jsonify({"error": error.message, "kind": error.kind}), status_for(error)


def bad_request(message: str):
    return jsonify({"error": message, "kind": "BadRequest"}), 400
