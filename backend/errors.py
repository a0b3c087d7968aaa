"""
Error taxonomy for the Teacher's Notebook.

Every error carries a short, human-readable ``message`` that can be shown to
the teacher as-is.
"""


class NotebookError(Exception):
    """Base class for all notebook errors."""

    default_message = "Something went wrong."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__


# Configuration
class InvalidEndpoint(NotebookError):
    default_message = "The Apps Script link is not valid."


class InvalidCredential(NotebookError):
    default_message = "The AI key looks too short."


# Roster / submission transport
class TransportError(NotebookError):
    default_message = "Could not reach the spreadsheet. Check the link."


class FormatError(NotebookError):
    default_message = "The spreadsheet returned data in an unexpected format."


# Drafts
class EmptyDraftError(NotebookError):
    default_message = "Enter a score or a comment before saving."


class DraftStateError(NotebookError):
    default_message = "This evaluation can no longer be changed."


class StudentNotFound(NotebookError):
    default_message = "Student not found in the roster."


# AI drafting
class AiUnavailable(NotebookError):
    default_message = "AI is locked. Connect an AI key first."


class AiAuthError(NotebookError):
    default_message = "The AI key was rejected. Please choose the key again."


class AiQuotaExceeded(NotebookError):
    default_message = "AI quota reached. Try again in a little while."


class AiRateLimited(AiQuotaExceeded):
    default_message = "Please wait a few seconds before asking the AI again."


class AiTransientError(NotebookError):
    default_message = "AI is busy, try again in a few seconds."


class NoOpenDraft(NotebookError):
    default_message = "No evaluation is open."
