"""
Custom exceptions for the order dashboard.

Exception Hierarchy:
    OrderDashboardError (base)
    ├── OrderFetchError     - GET /orders failed (runtime, graceful)
    ├── StatusUpdateError   - PATCH /orders/{id}/status failed (runtime, graceful)
    └── InvalidStatusError  - Caller asked for a status outside the lifecycle

Usage:
    Remote failures (OrderFetchError, StatusUpdateError) never escape the sync
    service - they become the error flag and a feedback notification.
    InvalidStatusError is a caller bug and is raised before any network call.
"""

from typing import Optional, Dict, Any


class OrderDashboardError(Exception):
    """
    Base exception for all order dashboard errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class OrderFetchError(OrderDashboardError):
    """
    The remote order list could not be fetched or decoded.

    This can occur when:
    - The storefront API is unreachable or times out
    - The bearer token is missing or rejected (401/403)
    - The response body is not JSON, or not a list of orders

    The previous order set is kept; the UI shows an error banner and the
    next poll tick (or a manual retry) tries again.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        details = {
            "resolution": "Check connectivity and credentials, then retry"
        }
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.status_code = status_code


class StatusUpdateError(OrderDashboardError):
    """
    The remote system did not accept a status change for one order.

    The server is expected to put a human-readable ``message`` field in the
    error body; when it does, that text is kept in ``server_message``.
    """

    def __init__(
        self,
        order_id: str,
        message: str,
        status_code: Optional[int] = None,
        server_message: Optional[str] = None
    ):
        details: Dict[str, Any] = {"order_id": order_id}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.order_id = order_id
        self.status_code = status_code
        self.server_message = server_message


class InvalidStatusError(OrderDashboardError):
    """Requested status is not one of pending, in-progress, completed."""

    def __init__(self, value: Any):
        super().__init__(
            f"Invalid order status: {value!r}",
            {"allowed": ["pending", "in-progress", "completed"]}
        )
        self.value = value
