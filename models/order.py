"""
Order data models and the order normalizer.

The storefront returns loosely-shaped order records (missing names, missing
addresses, status strings in any case, totals sometimes absent). This module
turns each raw record into a frozen Order with a defined value for every
field, so nothing downstream has to know the remote schema.

Thread Safety:
    - Order, OrderItem and GeoLocation are frozen dataclasses (immutable)
    - Safe to share between the polling thread and request threads
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional, Tuple

from modules.formatting import google_maps_link


NO_NAME = "No Name"
NO_PHONE = "No Phone"
NO_ADDRESS = "No Address"

ADDRESS_SEPARATOR = ", "


class OrderStatus(Enum):
    """
    Status of a customer order.

    Lifecycle:
        PENDING -> IN_PROGRESS -> COMPLETED
    """

    PENDING = "pending"
    """Order placed, not yet accepted by the store."""

    IN_PROGRESS = "in-progress"
    """Order accepted and being prepared."""

    COMPLETED = "completed"
    """Order delivered / handed over."""

    @property
    def label(self) -> str:
        """Badge text, e.g. 'In-progress'."""
        return self.value[:1].upper() + self.value[1:]

    @classmethod
    def from_raw(cls, value: Any) -> "OrderStatus":
        """
        Map a remote status value onto the lifecycle.

        Matching is case-insensitive; anything unknown (or missing) is PENDING.
        """
        if isinstance(value, str):
            lowered = value.strip().lower()
            for status in cls:
                if status.value == lowered:
                    return status
        return cls.PENDING


# Operator action offered on a card in each status: (next status, button text)
STATUS_ACTIONS: Dict[OrderStatus, Tuple[Optional[OrderStatus], str]] = {
    OrderStatus.PENDING: (OrderStatus.IN_PROGRESS, "Accept Order"),
    OrderStatus.IN_PROGRESS: (OrderStatus.COMPLETED, "Mark Completed"),
    OrderStatus.COMPLETED: (None, "Order Completed"),
}


def next_status(status: OrderStatus) -> Optional[OrderStatus]:
    """Status the card's action button moves the order to (None when done)."""
    return STATUS_ACTIONS[status][0]


@dataclass(frozen=True)
class GeoLocation:
    """Customer's pinned delivery location."""

    latitude: float
    longitude: float

    @property
    def map_link(self) -> str:
        return google_maps_link(self.latitude, self.longitude)

    def to_dict(self) -> Dict[str, Any]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class OrderItem:
    """One line of an order. Sequence position is display order."""

    name: str
    quantity: float
    unit_price: float
    line_total: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "lineTotal": self.line_total,
        }


@dataclass(frozen=True)
class Order:
    """
    Canonical, locally owned view of one storefront order.

    Created only by normalize_order(). Every field always has a value:
    sentinels stand in for missing customer data, total is never negative,
    and status is always one of the three OrderStatus members.
    """

    id: str
    """Remote identifier (``_id``); unique within an order set."""

    customer: str
    """Customer display name, or NO_NAME."""

    phone: str
    """Customer phone, or NO_PHONE."""

    address: str
    """'flatNo, society, area', or NO_ADDRESS."""

    status: OrderStatus
    """Normalized lifecycle status."""

    total: float
    """Order total (authoritative total, else sum of line totals)."""

    items: Tuple[OrderItem, ...] = field(default_factory=tuple)
    """Order lines in display order."""

    location: Optional[GeoLocation] = None
    """Pinned location; gates the map link."""

    placed_at: Optional[str] = None
    """Timestamp string copied from orderDate / createdAt."""

    @property
    def status_label(self) -> str:
        return self.status.label

    @property
    def map_link(self) -> Optional[str]:
        """Google Maps URL, or None when the customer pinned no location."""
        if self.location is None:
            return None
        return self.location.map_link

    @property
    def next_status(self) -> Optional[OrderStatus]:
        return next_status(self.status)

    @property
    def action_label(self) -> str:
        return STATUS_ACTIONS[self.status][1]

    @property
    def placed_at_datetime(self) -> Optional[datetime]:
        """Parsed placed_at, or None if absent or not ISO 8601."""
        if not self.placed_at:
            return None
        try:
            return datetime.fromisoformat(self.placed_at.replace("Z", "+00:00"))
        except (ValueError, AttributeError):
            return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        next_value = self.next_status
        return {
            "id": self.id,
            "customer": self.customer,
            "phone": self.phone,
            "address": self.address,
            "location": self.location.to_dict() if self.location else None,
            "mapLink": self.map_link,
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
            "status": self.status.value,
            "statusLabel": self.status_label,
            "nextStatus": next_value.value if next_value else None,
            "actionLabel": self.action_label,
            "placedAt": self.placed_at,
        }


# =============================================================================
# NORMALIZER
# =============================================================================

def _to_number(value: Any, default: float = 0.0) -> float:
    """Best-effort numeric coercion; never raises."""
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def _text(value: Any, fallback: str) -> str:
    if value is None:
        return fallback
    text = str(value).strip()
    return text or fallback


def _format_address(raw_address: Any) -> str:
    if not isinstance(raw_address, dict):
        return NO_ADDRESS

    parts = [raw_address.get(key) for key in ("flatNo", "society", "area")]
    if all(part is None or str(part).strip() == "" for part in parts):
        return NO_ADDRESS

    return ADDRESS_SEPARATOR.join(
        "" if part is None else str(part).strip() for part in parts
    )


def _parse_location(raw_location: Any) -> Optional[GeoLocation]:
    if not isinstance(raw_location, dict):
        return None

    latitude = _to_number(raw_location.get("latitude"), default=math.nan)
    longitude = _to_number(raw_location.get("longitude"), default=math.nan)
    if math.isnan(latitude) or math.isnan(longitude):
        return None
    return GeoLocation(latitude=latitude, longitude=longitude)


def _parse_item(raw_item: Any) -> OrderItem:
    if not isinstance(raw_item, dict):
        raw_item = {}

    quantity = _to_number(raw_item.get("quantity"))
    unit_price = _to_number(raw_item.get("price"))
    line_total = _to_number(raw_item.get("totalPrice"), default=quantity * unit_price)

    return OrderItem(
        name=_text(raw_item.get("name"), ""),
        quantity=quantity,
        unit_price=unit_price,
        line_total=line_total,
    )


def normalize_order(raw: Any) -> Order:
    """
    Build an Order from a raw storefront record.

    Total over any input: missing or malformed sub-structures fall back to
    sentinels / zeros, and the function never raises. The result depends only
    on ``raw`` - normalizing the same record twice gives equal Orders.

    Field mapping:
        _id                                   -> id ("" when absent)
        customerName / customerPhone          -> customer / phone (sentinels)
        deliveryAddress{flatNo,society,area}  -> address (sentinel)
        customerLocation{latitude,longitude}  -> location (None)
        orderItems[{name,quantity,price,totalPrice}] -> items
        orderTotal.total                      -> total (else sum of lines)
        orderStatus                           -> status (PENDING by default)
        orderDate / createdAt                 -> placed_at

    Args:
        raw: One element of the GET /orders response

    Returns:
        Normalized Order
    """
    if not isinstance(raw, dict):
        raw = {}

    raw_items = raw.get("orderItems")
    if not isinstance(raw_items, (list, tuple)):
        raw_items = []
    items = tuple(_parse_item(item) for item in raw_items)

    # A zero or missing authoritative total falls back to the line sum
    raw_total = raw.get("orderTotal")
    authoritative = _to_number(raw_total.get("total")) if isinstance(raw_total, dict) else 0.0
    if authoritative > 0:
        total = authoritative
    else:
        total = max(0.0, sum(item.line_total for item in items))

    placed_at = raw.get("orderDate") or raw.get("createdAt")

    return Order(
        id=_text(raw.get("_id"), ""),
        customer=_text(raw.get("customerName"), NO_NAME),
        phone=_text(raw.get("customerPhone"), NO_PHONE),
        address=_format_address(raw.get("deliveryAddress")),
        status=OrderStatus.from_raw(raw.get("orderStatus")),
        total=total,
        items=items,
        location=_parse_location(raw.get("customerLocation")),
        placed_at=str(placed_at) if placed_at else None,
    )
