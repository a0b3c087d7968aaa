"""
Notebook Services
=================

Business logic services for the Teacher's Notebook.

Services:
- ai_draft_service: Gemini-drafted evaluation comments
- submission_service: Posting evaluations to the spreadsheet endpoint
- notebook_session: Per-teacher orchestration and notifications
"""

# Services are imported directly when needed to avoid circular imports
# Example: from backend.services.notebook_session import NotebookSession

__all__ = [
    'ai_draft_service',
    'submission_service',
    'notebook_session'
]
