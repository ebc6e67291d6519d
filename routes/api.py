"""
Dashboard API routes (JSON endpoints).

Handles:
- GET  /api/dashboard               - Current dashboard snapshot
- POST /api/view                    - Change search term and/or tab
- POST /api/orders/<id>/status      - Move an order to a new status
- POST /api/refresh                 - Manual retry of the order fetch
- GET  /health                      - Health check endpoint

Routes only dispatch intents to the DashboardService and return its
snapshot; they never touch the order set.
"""

from flask import (
    Blueprint,
    current_app,
    request,
)

from core.exceptions import InvalidStatusError
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)


def _dashboard():
    return current_app.config["DASHBOARD_SERVICE"]


@api_bp.route("/api/dashboard", methods=["GET"])
def dashboard():
    """Current snapshot: orders, filtered view, stats, flags and toast."""
    return _dashboard().snapshot().to_dict()


@api_bp.route("/api/view", methods=["POST"])
def update_view():
    """
    Update the view inputs.

    Body: {"search": "...", "tab": "new|in-progress|completed|all"}
    Either key may be omitted.
    """
    data = request.get_json(silent=True) or {}
    dashboard_service = _dashboard()

    if "tab" in data:
        try:
            dashboard_service.set_tab(data["tab"])
        except ValueError:
            return {"error": f"Unknown tab: {data['tab']!r}"}, 400

    if "search" in data:
        dashboard_service.set_search(str(data["search"] or ""))

    return dashboard_service.snapshot().to_dict()


@api_bp.route("/api/orders/<order_id>/status", methods=["POST"])
def update_order_status(order_id: str):
    """
    Accept / complete an order.

    Body: {"status": "in-progress"}
    Remote failures are reported through the snapshot's notification,
    not as an HTTP error.
    """
    data = request.get_json(silent=True) or {}
    dashboard_service = _dashboard()

    try:
        ok = dashboard_service.set_status(order_id, data.get("status"))
    except InvalidStatusError as e:
        return {"error": e.message}, 400

    return {"ok": ok, "snapshot": dashboard_service.snapshot().to_dict()}


@api_bp.route("/api/refresh", methods=["POST"])
def refresh():
    """Fetch orders now (the 'Try Again' button)."""
    dashboard_service = _dashboard()
    ok = dashboard_service.refresh()
    return {"ok": ok, "snapshot": dashboard_service.snapshot().to_dict()}


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with service status."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {}
    }

    dashboard_service = current_app.config.get("DASHBOARD_SERVICE")
    if dashboard_service is None:
        health_status["checks"]["orders"] = "not_available"
        health_status["status"] = "degraded"
    else:
        sync_service = dashboard_service.sync_service
        health_status["checks"]["polling"] = (
            "running" if sync_service.is_polling else "stopped"
        )
        if sync_service.error:
            health_status["checks"]["orders"] = "error"
            health_status["status"] = "degraded"
        else:
            health_status["checks"]["orders"] = "ok"

    credentials = current_app.config.get("CREDENTIALS")
    health_status["checks"]["credential"] = (
        "present" if credentials is not None and credentials.has_token else "missing"
    )

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code
