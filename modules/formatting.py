"""
Display formatting helpers.

Pure functions, no network calls:
- google_maps_link: external map URL for a delivery location
- format_price: whole-rupee amount with Indian digit grouping (en-IN / INR)
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union


GOOGLE_MAPS_URL = "https://www.google.com/maps?q={latitude},{longitude}"

CURRENCY_SYMBOL = "₹"  # Indian rupee sign


def google_maps_link(latitude: float, longitude: float) -> str:
    """
    Build a Google Maps link for a coordinate pair.

    Example:
        google_maps_link(28.61, 77.2) -> "https://www.google.com/maps?q=28.61,77.2"
    """
    return GOOGLE_MAPS_URL.format(latitude=latitude, longitude=longitude)


def _group_indian(digits: str) -> str:
    # Last three digits, then groups of two: 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_price(amount: Union[int, float, Decimal]) -> str:
    """
    Format an amount as whole rupees, rounding half away from zero.

    Args:
        amount: Monetary amount (minor units are rounded away)

    Returns:
        Display string, e.g. 123456.6 -> "₹1,23,457", -50 -> "-₹50"
    """
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        value = Decimal(0)
    if not value.is_finite():
        value = Decimal(0)
    value = value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)

    sign = "-" if value < 0 else ""
    digits = str(abs(int(value)))
    return f"{sign}{CURRENCY_SYMBOL}{_group_indian(digits)}"
