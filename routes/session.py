"""
Credential routes.

The login form and token issuance live elsewhere; these endpoints only
hand the resulting bearer token to the dashboard (login) or drop it
(logout).
"""

from flask import Blueprint, current_app, request


session_bp = Blueprint("session", __name__)


@session_bp.route("/api/session", methods=["POST"])
def login():
    """Store the bearer token. Body: {"token": "..."}"""
    data = request.get_json(silent=True) or {}
    token = str(data.get("token") or "").strip()
    if not token:
        return {"error": "token is required"}, 400

    current_app.config["CREDENTIALS"].set(token)
    return {"ok": True}


@session_bp.route("/api/session", methods=["DELETE"])
def logout():
    """Clear the bearer token."""
    current_app.config["CREDENTIALS"].clear()
    return {"ok": True}
