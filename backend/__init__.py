"""
Teacher's Notebook Backend
==========================

Flask-based backend for browsing a class roster kept in a Google Sheet,
writing before/after-session evaluations and drafting comments with AI.

Structure:
- routes/: API route blueprints
- services/: AI drafting, submission and session orchestration
- config.py: Configuration management
- config_store.py, student_directory.py, evaluation.py, rate_limiter.py: core
"""

from .config import config, Config

__version__ = "1.0.0"

__all__ = ['config', 'Config']
