"""
Shared fixtures for the order dashboard tests.
"""

import pytest
from unittest.mock import MagicMock, Mock

from core.api_client import OrdersAPIClient
from services.feedback import FeedbackChannel


def make_raw_order(order_id="A", status="pending", **overrides):
    """Build a raw storefront order record like GET /orders returns."""
    raw = {
        "_id": order_id,
        "customerName": "Asha Verma",
        "customerPhone": "+91 98100 00000",
        "deliveryAddress": {
            "flatNo": "B-204",
            "society": "Green Meadows",
            "area": "Sector 45",
        },
        "customerLocation": {"latitude": 28.4595, "longitude": 77.0266},
        "orderItems": [
            {"name": "Basmati Rice 5kg", "quantity": 1, "price": 650, "totalPrice": 650},
            {"name": "Toor Dal 1kg", "quantity": 2, "price": 160, "totalPrice": 320},
        ],
        "orderTotal": {"total": 970},
        "orderStatus": status,
        "orderDate": "2026-10-18T09:30:00Z",
    }
    raw.update(overrides)
    return raw


class FakeTimer:
    """Stand-in for threading.Timer that fires only when told to."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args, **self.kwargs)


@pytest.fixture
def raw_order():
    return make_raw_order


@pytest.fixture
def mock_api_client():
    """API client mock returning orders A (pending) and B (completed)."""
    client = MagicMock(spec=OrdersAPIClient)
    client.list_orders.return_value = [
        make_raw_order("A", "pending"),
        make_raw_order("B", "completed", customerName="Ravi Kumar"),
    ]
    client.update_status.return_value = {"success": True}
    return client


@pytest.fixture
def mock_feedback():
    return Mock(spec=FeedbackChannel)


@pytest.fixture
def timers():
    """Collects every FakeTimer a FeedbackChannel creates."""
    created = []

    def factory(interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args, kwargs)
        created.append(timer)
        return timer

    factory.created = created
    return factory
