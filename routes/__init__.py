"""
Flask route blueprints for the order dashboard.

- api: dashboard snapshot, view changes, status updates, refresh, health
- session: bearer token login / logout

Each blueprint is registered with the Flask app in create_app().
"""

from .api import api_bp
from .session import session_bp

__all__ = [
    "api_bp",
    "session_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(api_bp)
    app.register_blueprint(session_bp)
