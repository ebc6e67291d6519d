"""
Derived views over the current order set.

Everything here is a pure function of (orders, search term, active tab) and
is recomputed from scratch on every call. The order set is small and is
replaced wholesale on every refresh, so there is nothing worth caching.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Tuple

from models.order import Order, OrderStatus
from models.snapshot import OrderStats


class ViewTab(Enum):
    """Dashboard tabs. Every tab except ALL maps to one order status."""

    NEW = "new"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ALL = "all"

    @property
    def status(self) -> Optional[OrderStatus]:
        """Status shown under this tab, or None for ALL."""
        return _TAB_STATUS[self]

    @classmethod
    def parse(cls, value: str) -> "ViewTab":
        """
        Look up a tab by its value.

        Raises:
            ValueError: If value is not a known tab
        """
        return cls(str(value).strip().lower())


_TAB_STATUS = {
    ViewTab.NEW: OrderStatus.PENDING,
    ViewTab.IN_PROGRESS: OrderStatus.IN_PROGRESS,
    ViewTab.COMPLETED: OrderStatus.COMPLETED,
    ViewTab.ALL: None,
}


def matches_search(order: Order, search_term: str) -> bool:
    """Case-insensitive substring match on customer name or address."""
    if not search_term:
        return True
    needle = search_term.lower()
    return needle in order.customer.lower() or needle in order.address.lower()


def matches_tab(order: Order, tab: ViewTab) -> bool:
    return tab is ViewTab.ALL or order.status is tab.status


def filter_orders(
    orders: Iterable[Order],
    search_term: str = "",
    tab: ViewTab = ViewTab.ALL
) -> Tuple[Order, ...]:
    """
    Orders visible under the current search term and tab.

    The result keeps the input's iteration order; nothing is re-sorted.
    """
    return tuple(
        order for order in orders
        if matches_search(order, search_term) and matches_tab(order, tab)
    )


def compute_stats(orders: Iterable[Order]) -> OrderStats:
    """
    Per-status counts and total sales over the whole order set.

    Search and tab never affect these numbers.
    """
    pending = in_progress = completed = 0
    total_sales = 0.0

    for order in orders:
        if order.status is OrderStatus.PENDING:
            pending += 1
        elif order.status is OrderStatus.IN_PROGRESS:
            in_progress += 1
        elif order.status is OrderStatus.COMPLETED:
            completed += 1
        total_sales += order.total

    return OrderStats(
        pending=pending,
        in_progress=in_progress,
        completed=completed,
        total_sales=total_sales,
    )


def empty_state_message(search_term: str, tab: ViewTab) -> str:
    """Text shown when the filtered view is empty."""
    if search_term:
        return "No orders match your search criteria"
    return f"No {tab.value} orders at the moment"
