"""
Order Dashboard - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration and logging
2. Builds the credential provider and storefront API client
3. Creates the feedback channel, order sync service and dashboard service
4. Starts order polling (unless disabled)
5. Registers route blueprints and error handlers

ARCHITECTURE:
    Main Thread
    ├── Flask request handling (intents: view, status, refresh, session)
    └── Cleanup on shutdown (cancel polling, cancel toast timer)

    OrderPoller Thread (background)
    └── Refresh loop: GET /orders -> normalize -> swap order set
"""

from __future__ import annotations

import atexit
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from logging_config import setup_logging, get_logger
from core.api_client import OrdersAPIClient
from core.credentials import CredentialProvider
from services.feedback import FeedbackChannel
from services.order_sync_service import OrderSyncService
from services.dashboard_service import DashboardService
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def create_app(
    config_object: str = "config.Config",
    api_client: Optional[OrdersAPIClient] = None
) -> Flask:
    """
    Application factory - creates and configures the Flask app.

    Args:
        config_object: Import path of the config class
        api_client: Optional pre-built client (tests inject a mock)

    Returns:
        Configured Flask application
    """
    load_dotenv(override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting order dashboard in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    credentials = CredentialProvider(app.config.get("ORDERS_API_TOKEN"))
    app.config["CREDENTIALS"] = credentials

    if api_client is None:
        api_client = OrdersAPIClient(
            base_url=app.config["ORDERS_API_BASE_URL"],
            credentials=credentials,
            list_path=app.config.get("ORDERS_LIST_PATH", "/orders"),
            timeout_seconds=app.config.get("ORDERS_REQUEST_TIMEOUT", 15.0),
        )

    feedback = FeedbackChannel(
        duration_seconds=app.config.get("NOTIFICATION_DURATION_MS", 3000) / 1000.0
    )
    sync_service = OrderSyncService(
        api_client,
        feedback,
        poll_interval_seconds=app.config.get("ORDERS_POLL_INTERVAL_MS", 30000) / 1000.0
    )
    dashboard_service = DashboardService(sync_service, feedback)

    app.config["FEEDBACK"] = feedback
    app.config["SYNC_SERVICE"] = sync_service
    app.config["DASHBOARD_SERVICE"] = dashboard_service

    if app.config.get("AUTO_START_POLLING"):
        dashboard_service.mount()
        logger.info("Order polling started")

    # =========================================================================
    # CLEANUP REGISTRATION
    # =========================================================================

    def cleanup():
        """Cleanup on application shutdown."""
        logger.info("Shutting down...")
        dashboard_service.unmount()
        feedback.close()
        logger.info("Shutdown complete")

    app.config["CLEANUP"] = cleanup

    # Test apps are torn down by their fixtures
    if not app.config.get("TESTING"):
        atexit.register(cleanup)

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(404)
    def handle_not_found(e):
        return {"error": "Not found"}, 404

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return {"error": "An unexpected error occurred. Please try again."}, 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    # Reloader would start a second polling loop
    app.run(debug=debug_mode, use_reloader=False)
