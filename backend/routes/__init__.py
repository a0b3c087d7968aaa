"""
Notebook API Routes
===================

All API route blueprints for the Teacher's Notebook.

Usage:
    from backend.routes import register_routes
    register_routes(app, session)
"""
from backend.errors import NotebookError

from .config_routes import config_bp
from .roster_routes import roster_bp
from .evaluation_routes import evaluation_bp
from .helpers import SESSION_KEY, error_response


def register_routes(app, session):
    """Attach the session and register all route blueprints with the Flask app."""
    app.config[SESSION_KEY] = session

    app.register_blueprint(config_bp)
    app.register_blueprint(roster_bp)
    app.register_blueprint(evaluation_bp)

    @app.errorhandler(NotebookError)
    def handle_notebook_error(error):
        return error_response(error)


__all__ = [
    'register_routes',
    'config_bp',
    'roster_bp',
    'evaluation_bp',
]
