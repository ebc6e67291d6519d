"""
Configuration for the order dashboard.

Values come from the environment (optionally a .env file next to this
module). The storefront API is the only external dependency.
"""

import os

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
load_dotenv(override=True)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"
    TESTING = False

    # ==========================================================================
    # Storefront order API
    # ==========================================================================
    # ORDERS_API_BASE_URL: API root; list is GET {base}{ORDERS_LIST_PATH},
    #   status updates go to PATCH {base}/orders/<id>/status
    # ORDERS_API_TOKEN: optional bearer token to start with (normally set at
    #   login through POST /api/session)
    # ==========================================================================
    ORDERS_API_BASE_URL = os.environ.get(
        "ORDERS_API_BASE_URL", "https://products.jogisuperstore.com/api"
    )
    ORDERS_LIST_PATH = os.environ.get("ORDERS_LIST_PATH", "/orders")
    ORDERS_API_TOKEN = os.environ.get("ORDERS_API_TOKEN") or None
    ORDERS_REQUEST_TIMEOUT = float(os.environ.get("ORDERS_REQUEST_TIMEOUT", "15"))

    # Poll cadence and toast lifetime, in milliseconds
    ORDERS_POLL_INTERVAL_MS = int(os.environ.get("ORDERS_POLL_INTERVAL_MS", "30000"))
    NOTIFICATION_DURATION_MS = int(os.environ.get("NOTIFICATION_DURATION_MS", "3000"))

    # Start the polling loop when the app is created
    AUTO_START_POLLING = _env_flag("AUTO_START_POLLING", "1")


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    ORDERS_API_BASE_URL = "http://orders.test/api"
    ORDERS_API_TOKEN = None
    AUTO_START_POLLING = False
