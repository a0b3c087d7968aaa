"""
AI Comment Drafting
===================
Asks Gemini for a very short, encouraging comment for one student.

Only the student's display name, the session phase and the score/label are
sent. The service never touches a draft directly: it returns the cleaned
text and the caller decides whether the draft it was asked about is still
the one on screen.
"""

import logging
import threading

from google.api_core import exceptions as google_exceptions

from backend.config import (
    AI_MODEL, AI_MIN_INTERVAL, AI_MAX_WORDS, AI_FALLBACK_COMMENT,
    MIN_CREDENTIAL_LENGTH, REQUEST_TIMEOUT,
)
from backend.config_store import Configuration
from backend.errors import (
    NotebookError, AiUnavailable, AiAuthError, AiQuotaExceeded,
    AiRateLimited, AiTransientError,
)
from backend.evaluation import Phase
from backend.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

QUOTE_CHARS = "\"'`“”‘’"


def build_prompt(student_name: str, phase, score_or_label: str = "") -> str:
    """Prompt for a one-line encouraging comment."""
    phase = Phase.parse(phase)
    moment = "before today's session" if phase == Phase.BEFORE_SESSION else "after today's session"
    result = (score_or_label or "").strip() or "good"
    return (
        f'Write one very short teacher comment (under {AI_MAX_WORDS} words) for the student '
        f'"{student_name}", who was rated "{result}" {moment}. '
        f'Tone: encouraging and brief. Reply with the comment only.'
    )


def clean_completion(text) -> str:
    """Trim whitespace and wrapping quotes from a model reply."""
    cleaned = (text or "").strip()
    while cleaned and (cleaned[0] in QUOTE_CHARS or cleaned[-1] in QUOTE_CHARS):
        cleaned = cleaned.strip(QUOTE_CHARS).strip()
    return cleaned or AI_FALLBACK_COMMENT


def classify_ai_error(exc: Exception) -> NotebookError:
    """Map a Gemini client exception onto the notebook's AI error kinds."""
    if isinstance(exc, (google_exceptions.Unauthenticated,
                        google_exceptions.PermissionDenied,
                        google_exceptions.NotFound)):
        return AiAuthError()
    if isinstance(exc, google_exceptions.InvalidArgument) and "api key" in str(exc).lower():
        return AiAuthError()
    if isinstance(exc, (google_exceptions.ResourceExhausted, google_exceptions.TooManyRequests)):
        return AiQuotaExceeded()
    return AiTransientError()


class AiDraftService:
    """Gemini-backed comment drafting guarded by a rate limiter."""

    def __init__(self, config_store, rate_limiter: RateLimiter = None,
                 model: str = AI_MODEL, timeout: float = REQUEST_TIMEOUT):
        self.config_store = config_store
        self.rate_limiter = rate_limiter or RateLimiter(AI_MIN_INTERVAL)
        self._limiter_lock = threading.Lock()
        self.model = model
        self.timeout = timeout
        self.ready = False
        self.check_status()

    @property
    def credential(self) -> str:
        return self.config_store.current.ai_credential

    def check_status(self) -> bool:
        """Re-evaluate whether a usable credential is configured."""
        self.ready = len(self.credential) >= MIN_CREDENTIAL_LENGTH
        logger.info("AI drafting %s", "ready" if self.ready else "locked")
        return self.ready

    def connect(self, credential: str) -> bool:
        """Save a new AI key (keeping the endpoint) and re-check availability."""
        current = self.config_store.current
        self.config_store.save(Configuration(current.endpoint_url, credential))
        return self.check_status()

    def generate(self, student_name: str, phase, score_or_label: str = "") -> str:
        """
        Draft a comment for one student.

        Raises AiUnavailable without a key, AiRateLimited when called again
        within the minimum interval, and AiAuthError, AiQuotaExceeded or
        AiTransientError when the remote call fails.
        """
        credential = self.credential
        if not credential:
            raise AiUnavailable()
        with self._limiter_lock:
            acquired = self.rate_limiter.try_acquire()
        if not acquired:
            raise AiRateLimited()

        prompt = build_prompt(student_name, phase, score_or_label)
        logger.debug("AI draft prompt: %s", prompt)
        try:
            text = self._generate_completion(credential, prompt)
        except Exception as e:
            error = classify_ai_error(e)
            logger.warning("AI draft failed (%s): %s", error.kind, e)
            if isinstance(error, AiAuthError):
                self.ready = False
            raise error from e

        return clean_completion(text)

    def _generate_completion(self, credential: str, prompt: str) -> str:
        import google.generativeai as genai
        genai.configure(api_key=credential)
        gemini_client = genai.GenerativeModel(self.model)
        response = gemini_client.generate_content(
            prompt, request_options={"timeout": self.timeout}
        )
        return response.text
