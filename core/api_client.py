"""
HTTP client for the storefront order API.

This module wraps the two endpoints the dashboard needs:

    GET   {base_url}/orders               -> list of raw order records
    PATCH {base_url}/orders/{id}/status   -> {"status": "..."} body

Every request carries the operator's bearer token (when one is stored) and
returns plain decoded JSON. Normalization into Order objects happens in
models.order - this client never interprets order fields.

THREAD SAFETY:
    - The polling thread and request threads share one client
    - requests.Session is safe for concurrent simple GET/PATCH calls
    - The token is read from the CredentialProvider on every call

Usage:
    client = OrdersAPIClient(
        base_url="https://products.example.com/api",
        credentials=credential_provider,
    )

    raw_orders = client.list_orders()
    client.update_status("64f1...", "in-progress")
"""

from __future__ import annotations

import logging
from typing import Dict, Any, List, Optional

import requests

from .credentials import CredentialProvider
from .exceptions import OrderFetchError, StatusUpdateError


class OrdersAPIClient:
    """
    Thin wrapper around the storefront order endpoints.

    Raises only OrderFetchError / StatusUpdateError - transport and decode
    errors from requests are translated so callers have a single failure
    type per operation.

    Attributes:
        base_url: API root without trailing slash
        timeout_seconds: Per-request timeout
    """

    def __init__(
        self,
        base_url: str,
        credentials: CredentialProvider,
        list_path: str = "/orders",
        timeout_seconds: float = 15.0,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root, e.g. "https://products.example.com/api"
            credentials: Provider for the bearer token
            list_path: Path of the order list endpoint
            timeout_seconds: Timeout applied to every request
            session: Optional requests.Session (tests inject a mock)
            logger: Logger instance (creates default if not provided)

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required")

        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._list_path = "/" + list_path.lstrip("/")
        self._credentials = credentials
        self._session = session or requests.Session()
        self._logger = logger or logging.getLogger("order_dashboard.core.api_client")

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._credentials.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def list_orders(self) -> List[Dict[str, Any]]:
        """
        Fetch every order the storefront currently reports.

        Returns:
            List of raw order dictionaries, in the server's order

        Raises:
            OrderFetchError: On transport failure, non-2xx status,
                invalid JSON, or a payload that is not a list
        """
        url = f"{self.base_url}{self._list_path}"
        self._logger.debug(f"GET {url}")

        try:
            response = self._session.get(
                url, headers=self._headers(), timeout=self.timeout_seconds
            )
        except requests.RequestException as e:
            self._logger.error(f"Order fetch transport error: {e}")
            raise OrderFetchError(f"Failed to fetch orders: {e}")

        if not response.ok:
            self._logger.error(f"Order fetch returned HTTP {response.status_code}")
            raise OrderFetchError(
                f"Failed to fetch orders: HTTP {response.status_code}",
                status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            self._logger.error(f"Invalid JSON in order list: {e}")
            raise OrderFetchError(f"Invalid JSON in order list response: {e}")

        if not isinstance(data, list):
            raise OrderFetchError(
                f"Expected a list of orders, got {type(data).__name__}"
            )

        self._logger.debug(f"Fetched {len(data)} raw orders")
        return data

    def update_status(self, order_id: str, status: str) -> Dict[str, Any]:
        """
        Ask the storefront to move one order to a new status.

        Args:
            order_id: Remote order identifier
            status: New status value ("pending", "in-progress", "completed")

        Returns:
            Decoded response body (empty dict when the body is not JSON)

        Raises:
            StatusUpdateError: On transport failure or non-2xx status
        """
        url = f"{self.base_url}/orders/{order_id}/status"
        self._logger.info(f"PATCH {url} -> {status}")

        try:
            response = self._session.patch(
                url,
                headers=self._headers(),
                json={"status": status},
                timeout=self.timeout_seconds
            )
        except requests.RequestException as e:
            self._logger.error(f"Status update transport error for {order_id}: {e}")
            raise StatusUpdateError(order_id, f"Failed to update order status: {e}")

        body = _json_or_empty(response)

        if not response.ok:
            server_message = body.get("message") if isinstance(body, dict) else None
            self._logger.error(
                f"Status update for {order_id} returned HTTP {response.status_code}: "
                f"{server_message or 'no message'}"
            )
            raise StatusUpdateError(
                order_id,
                server_message or "Failed to update order status",
                status_code=response.status_code,
                server_message=server_message
            )

        return body if isinstance(body, dict) else {}


def _json_or_empty(response: requests.Response) -> Any:
    """Decode a response body, tolerating empty or non-JSON bodies."""
    try:
        return response.json()
    except ValueError:
        return {}
