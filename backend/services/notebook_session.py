"""
Notebook Session
================
Wires the configuration store, roster, AI drafting and submission together
for one teacher, and owns the evaluation draft currently on screen.

Every action leaves a short notification behind for the UI to show.
Failures are reported and re-raised as NotebookError subclasses; none of
them leave the roster, configuration or draft half-updated.
"""

import time
import logging
import threading

from backend.config import NOTIFICATION_TTL, config
from backend.config_store import ConfigStore, Configuration
from backend.errors import NotebookError, InvalidEndpoint, StudentNotFound, DraftStateError, NoOpenDraft
from backend.evaluation import EvaluationDraft, DraftState, Phase
from backend.rate_limiter import RateLimiter
from backend.student_directory import StudentDirectory
from backend.services.ai_draft_service import AiDraftService
from backend.services.submission_service import EvaluationSubmitter

logger = logging.getLogger(__name__)


class Notification:
    """A transient banner message."""

    def __init__(self, message: str, kind: str, ttl: float = NOTIFICATION_TTL, clock=time.monotonic):
        self.message = message
        self.kind = kind
        self.expires_at = clock() + ttl

    def is_active(self, now: float) -> bool:
        return now < self.expires_at

    def to_dict(self):
        return {"message": self.message, "type": self.kind}


class NotebookSession:
    """Single-teacher session state."""

    def __init__(self, config_store: ConfigStore = None, directory: StudentDirectory = None,
                 ai_service: AiDraftService = None, submitter: EvaluationSubmitter = None,
                 clock=time.monotonic):
        self.config_store = config_store or ConfigStore(
            config.settings_file, config.default_endpoint_url, config.default_ai_credential
        )
        self.directory = directory or StudentDirectory(timeout=config.request_timeout)
        self.ai_service = ai_service or AiDraftService(
            self.config_store,
            rate_limiter=RateLimiter(config.ai_min_interval),
            model=config.ai_model,
            timeout=config.request_timeout,
        )
        self.submitter = submitter or EvaluationSubmitter(timeout=config.request_timeout)
        self.clock = clock
        self._draft = None
        self._notification = None
        self._lock = threading.RLock()

    # ── notifications ──────────────────────────────────────────

    def notify(self, message: str, kind: str = "success"):
        with self._lock:
            self._notification = Notification(message, kind, clock=self.clock)
        log = logger.info if kind == "success" else logger.warning
        log("Notify [%s]: %s", kind, message)

    def _notify_error(self, error: NotebookError):
        self.notify(error.message, "error")

    @property
    def notification(self):
        with self._lock:
            note = self._notification
            if note is not None and not note.is_active(self.clock()):
                self._notification = note = None
            return note

    # ── configuration ──────────────────────────────────────────

    def needs_configuration(self) -> bool:
        return self.config_store.needs_configuration()

    def status(self):
        return {
            "needs_configuration": self.needs_configuration(),
            "ai_ready": self.ai_service.ready,
            "student_count": len(self.directory.students),
            "last_refreshed": (self.directory.last_refreshed.isoformat()
                               if self.directory.last_refreshed else None),
        }

    def save_configuration(self, endpoint_url: str, ai_credential: str = None) -> Configuration:
        """Save settings, then try to sync the roster from the new endpoint."""
        if ai_credential is None:
            ai_credential = self.config_store.current.ai_credential
        try:
            saved = self.config_store.save(Configuration(endpoint_url, ai_credential))
        except NotebookError as e:
            self._notify_error(e)
            raise
        self.ai_service.check_status()

        if saved.has_endpoint:
            try:
                self.refresh_roster()
            except NotebookError:
                # Already reported; the saved settings stay.
                pass
        return saved

    def connect_ai(self, credential: str) -> bool:
        try:
            ready = self.ai_service.connect(credential)
        except NotebookError as e:
            self._notify_error(e)
            raise
        self.notify("AI is ready!" if ready else "AI is still locked.", "success" if ready else "error")
        return ready

    # ── roster ─────────────────────────────────────────────────

    def refresh_roster(self, silent: bool = False) -> int:
        try:
            count = self.directory.refresh(self.config_store.current.endpoint_url)
        except NotebookError as e:
            if not silent:
                self._notify_error(e)
            raise
        if not silent:
            self.notify("Roster synced!")
        return count

    # ── evaluation drafts ──────────────────────────────────────

    @property
    def current_draft(self):
        with self._lock:
            return self._draft

    def _require_draft(self) -> EvaluationDraft:
        draft = self._draft
        if draft is None or draft.state in (DraftState.SUBMITTED, DraftState.DISCARDED):
            raise NoOpenDraft()
        return draft

    def open_evaluation(self, grade: str, class_name: str, student_name: str, phase) -> EvaluationDraft:
        student = self.directory.find_student(grade, class_name, student_name)
        if student is None:
            error = StudentNotFound()
            self._notify_error(error)
            raise error
        draft = EvaluationDraft(student.class_name, student.full_name, Phase.parse(phase))
        with self._lock:
            previous = self._draft
            if previous is not None and previous.is_editable:
                previous.discard()
            self._draft = draft
        logger.info("Opened evaluation draft %s (%s)", draft.draft_id, draft.phase.value)
        return draft

    def edit_evaluation(self, score_or_label: str = None, comment: str = None) -> EvaluationDraft:
        with self._lock:
            draft = self._require_draft()
            draft.edit(score_or_label=score_or_label, comment=comment)
            return draft

    def close_evaluation(self):
        with self._lock:
            draft = self._draft
            if draft is None:
                return
            if draft.is_editable:
                draft.discard()
            elif draft.state == DraftState.SUBMITTING:
                raise DraftStateError("Still saving, please wait.")
            self._draft = None

    def draft_comment(self):
        """
        Ask the AI for a comment for the open draft.

        The AI call runs without holding the session lock. Its result is
        applied only if the same draft is still open and editable; otherwise
        it is dropped and None is returned.
        """
        with self._lock:
            draft = self._require_draft()
            draft_id = draft.draft_id
            student_name, phase, score = draft.student_name, draft.phase, draft.score_or_label

        try:
            text = self.ai_service.generate(student_name, phase, score)
        except NotebookError as e:
            self._notify_error(e)
            raise

        with self._lock:
            current = self._draft
            if current is None or current.draft_id != draft_id or not current.is_editable:
                logger.info("Dropping AI draft for closed draft %s", draft_id)
                return None
            current.apply_ai_comment(text)
        self.notify("AI drafted the comment!")
        return text

    def submit_evaluation(self) -> EvaluationDraft:
        endpoint_url = self.config_store.current.endpoint_url
        try:
            with self._lock:
                draft = self._require_draft()
                if not endpoint_url:
                    raise InvalidEndpoint("No Apps Script link configured yet.")
                draft.begin_submit()
            self.submitter.send(draft, endpoint_url)
        except NotebookError as e:
            self._notify_error(e)
            raise

        with self._lock:
            if self._draft is draft:
                self._draft = None
        self.notify("Saved!")
        return draft
