"""
Data models for the order dashboard.

This module contains immutable dataclasses for:
- Order: Normalized storefront order (plus OrderItem, GeoLocation)
- Notification: Current toast message
- OrderStats / DashboardSnapshot: What the dashboard renders

All dataclasses are frozen so snapshots can be handed from the polling
thread to request threads without locks.
"""

from .order import (
    Order,
    OrderItem,
    OrderStatus,
    GeoLocation,
    normalize_order,
    next_status,
)
from .notification import Notification, NotificationKind
from .snapshot import OrderStats, DashboardSnapshot

__all__ = [
    # Order models
    "Order",
    "OrderItem",
    "OrderStatus",
    "GeoLocation",
    "normalize_order",
    "next_status",
    # Feedback models
    "Notification",
    "NotificationKind",
    # View models
    "OrderStats",
    "DashboardSnapshot",
]
