"""
Dashboard snapshot models.

The presentation layer never reads service internals. On every change
notification it pulls one DashboardSnapshot - a frozen, self-consistent
picture of orders, derived views, flags and the current toast.

Thread Safety:
    - OrderStats and DashboardSnapshot are frozen dataclasses (immutable)
    - A snapshot built from one SyncState never mixes two order sets
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Any, Optional, Tuple

from models.notification import Notification
from models.order import Order
from modules.formatting import format_price


@dataclass(frozen=True)
class OrderStats:
    """Aggregate figures over the entire order set."""

    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    total_sales: float = 0.0

    @property
    def total_sales_display(self) -> str:
        return format_price(self.total_sales)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pending": self.pending,
            "inProgress": self.in_progress,
            "completed": self.completed,
            "totalSales": self.total_sales,
            "totalSalesDisplay": self.total_sales_display,
        }


@dataclass(frozen=True)
class DashboardSnapshot:
    """
    Everything the dashboard renders, at one instant.

    ``orders`` is the full set in fetch order; ``filtered`` is the subset
    visible under ``search_term`` / ``active_tab``.
    """

    orders: Tuple[Order, ...]
    filtered: Tuple[Order, ...]
    stats: OrderStats
    search_term: str
    active_tab: str
    loading: bool = False
    error: Optional[str] = None
    notification: Optional[Notification] = None
    empty_message: str = ""
    last_refreshed_at: Optional[datetime] = None

    @property
    def order_count(self) -> int:
        return len(self.orders)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        return {
            "orders": [order.to_dict() for order in self.orders],
            "filtered": [order.to_dict() for order in self.filtered],
            "stats": self.stats.to_dict(),
            "orderCount": self.order_count,
            "searchTerm": self.search_term,
            "activeTab": self.active_tab,
            "loading": self.loading,
            "error": self.error,
            "notification": self.notification.to_dict() if self.notification else None,
            "emptyMessage": self.empty_message,
            "lastRefreshedAt": (
                self.last_refreshed_at.isoformat() if self.last_refreshed_at else None
            ),
        }
