"""
Evaluation Submission
=====================
Posts a finished evaluation to the teacher's Apps Script endpoint.

Apps Script web apps do not give back a reliable structured reply to a
cross-origin POST, so a request that completes without a transport error is
treated as saved.
"""

import json
import logging

import requests

from backend.config import REQUEST_TIMEOUT
from backend.errors import InvalidEndpoint, TransportError

logger = logging.getLogger(__name__)


class EvaluationSubmitter:
    """Sends drafts to the spreadsheet endpoint."""

    def __init__(self, http=None, timeout: float = REQUEST_TIMEOUT):
        self.http = http or requests
        self.timeout = timeout

    def submit(self, draft, endpoint_url: str):
        """
        Submit one draft.

        Blank drafts raise EmptyDraftError before anything is sent. On a
        transport failure the draft moves to submit_failed with its values
        kept, and TransportError is raised.
        """
        if not endpoint_url:
            raise InvalidEndpoint("No Apps Script link configured yet.")

        draft.begin_submit()
        self.send(draft, endpoint_url)

    def send(self, draft, endpoint_url: str):
        """POST a draft that is already in the submitting state."""
        try:
            body = json.dumps(draft.to_payload(), ensure_ascii=False)
            self.http.post(
                endpoint_url,
                data=body.encode("utf-8"),
                headers={"Content-Type": "text/plain;charset=utf-8"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            draft.mark_failed()
            logger.warning("Evaluation submit failed for draft %s: %s", draft.draft_id, e)
            raise TransportError("Could not save the evaluation. Please try again.") from e
        except Exception:
            # never leave the draft stuck in submitting
            draft.mark_failed()
            logger.exception("Unexpected error submitting draft %s", draft.draft_id)
            raise

        draft.mark_submitted()
        logger.info("Evaluation saved: %s / %s", draft.class_name, draft.phase.value)
