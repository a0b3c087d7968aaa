#!/usr/bin/env python3
"""
Teacher's Notebook - class roster, session evaluations and AI comments
======================================================================
Run: python3 -m backend.app
The JSON API listens on http://localhost:3000/api/
"""

import os
import logging

from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv

# Load environment variables
_app_dir = os.path.dirname(os.path.abspath(__file__))
_root_dir = os.path.dirname(_app_dir)
load_dotenv(os.path.join(_root_dir, '.env'), override=True)

from backend.config import HOST, PORT, DEBUG
from backend.errors import NotebookError
from backend.routes import register_routes
from backend.services.notebook_session import NotebookSession

logger = logging.getLogger(__name__)


def create_app(session: NotebookSession = None, sync_on_start: bool = True):
    """Build the Flask app around one NotebookSession."""
    app = Flask(__name__)
    CORS(app)

    session = session or NotebookSession()
    register_routes(app, session)

    if sync_on_start and not session.needs_configuration():
        try:
            session.refresh_roster(silent=True)
        except NotebookError as e:
            logger.warning("Startup roster sync failed: %s", e.message)

    return app


def main():
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    app = create_app()
    logger.info("Teacher's Notebook running on http://%s:%s", HOST, PORT)
    app.run(host=HOST, port=PORT, debug=DEBUG, threaded=True)


if __name__ == '__main__':
    main()
