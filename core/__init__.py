"""
Core module for the order dashboard.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- credentials: Bearer token storage
- api_client: HTTP client for the storefront order API
"""

from .exceptions import (
    OrderDashboardError,
    OrderFetchError,
    StatusUpdateError,
    InvalidStatusError,
)
from .credentials import CredentialProvider
from .api_client import OrdersAPIClient

__all__ = [
    "OrderDashboardError",
    "OrderFetchError",
    "StatusUpdateError",
    "InvalidStatusError",
    "CredentialProvider",
    "OrdersAPIClient",
]
