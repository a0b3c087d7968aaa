"""
Evaluation drafts: the in-progress record behind the evaluation form.
"""
import uuid
from enum import Enum

from backend.errors import EmptyDraftError, DraftStateError


class Phase(str, Enum):
    BEFORE_SESSION = "Before Session"
    AFTER_SESSION = "After Session"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for phase in cls:
            if text in (phase.value.lower(), phase.name.lower(), phase.value.split()[0].lower()):
                return phase
        raise ValueError(f"Unknown phase: {value!r}")


class DraftState(str, Enum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    SUBMIT_FAILED = "submit_failed"
    DISCARDED = "discarded"


EDITABLE_STATES = (DraftState.EDITING, DraftState.SUBMIT_FAILED)


def _field_text(value):
    # JSON clients may send a numeric score (8, 7.5)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class EvaluationDraft:
    """
    One evaluation being edited for one student and one phase.

    Class, student and phase are fixed at creation. Only the score/label and
    the comment can change, and only while the draft is editable.
    """

    def __init__(self, class_name: str, student_name: str, phase, score_or_label: str = "", comment: str = ""):
        self._draft_id = uuid.uuid4().hex
        self._class_name = class_name
        self._student_name = student_name
        self._phase = Phase.parse(phase)
        self.score_or_label = _field_text(score_or_label)
        self.comment = _field_text(comment)
        self.state = DraftState.EDITING

    @property
    def draft_id(self):
        return self._draft_id

    @property
    def class_name(self):
        return self._class_name

    @property
    def student_name(self):
        return self._student_name

    @property
    def phase(self):
        return self._phase

    @property
    def is_editable(self):
        return self.state in EDITABLE_STATES

    @property
    def is_blank(self):
        return not self.score_or_label.strip() and not self.comment.strip()

    def _require_editable(self):
        if not self.is_editable:
            raise DraftStateError()

    def edit(self, score_or_label: str = None, comment: str = None):
        self._require_editable()
        if score_or_label is not None:
            self.score_or_label = _field_text(score_or_label)
        if comment is not None:
            self.comment = _field_text(comment)
        self.state = DraftState.EDITING

    def apply_ai_comment(self, text: str):
        self._require_editable()
        self.comment = _field_text(text)
        self.state = DraftState.EDITING

    def begin_submit(self):
        self._require_editable()
        if self.is_blank:
            raise EmptyDraftError()
        self.state = DraftState.SUBMITTING

    def mark_submitted(self):
        if self.state != DraftState.SUBMITTING:
            raise DraftStateError()
        self.state = DraftState.SUBMITTED

    def mark_failed(self):
        if self.state != DraftState.SUBMITTING:
            raise DraftStateError()
        self.state = DraftState.SUBMIT_FAILED

    def discard(self):
        if self.state == DraftState.SUBMITTING:
            raise DraftStateError("Still saving, please wait.")
        self.state = DraftState.DISCARDED

    def to_payload(self):
        """Body posted to the spreadsheet endpoint."""
        return {
            "className": self.class_name,
            "studentName": self.student_name,
            "phase": self.phase.value,
            "comment": self.comment,
            "scoreOrLabel": self.score_or_label,
        }

    def to_dict(self):
        data = self.to_payload()
        data["draftId"] = self.draft_id
        data["state"] = self.state.value
        return data
