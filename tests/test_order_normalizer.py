"""
Unit tests for the order normalizer.

Covers sentinel fallbacks, totals, status mapping and malformed records.
"""

import pytest

from models.order import (
    NO_ADDRESS,
    NO_NAME,
    NO_PHONE,
    GeoLocation,
    OrderStatus,
    normalize_order,
    next_status,
)
from tests.conftest import make_raw_order


class TestFieldMapping:
    """Well-formed records map field by field."""

    def test_full_record(self):
        order = normalize_order(make_raw_order("64f1a"))

        assert order.id == "64f1a"
        assert order.customer == "Asha Verma"
        assert order.phone == "+91 98100 00000"
        assert order.address == "B-204, Green Meadows, Sector 45"
        assert order.location == GeoLocation(latitude=28.4595, longitude=77.0266)
        assert order.status is OrderStatus.PENDING
        assert order.total == 970
        assert order.placed_at == "2026-10-18T09:30:00Z"

    def test_items_keep_display_order(self):
        order = normalize_order(make_raw_order())

        assert [item.name for item in order.items] == ["Basmati Rice 5kg", "Toor Dal 1kg"]
        second = order.items[1]
        assert second.quantity == 2
        assert second.unit_price == 160
        assert second.line_total == 320

    def test_created_at_used_when_order_date_missing(self):
        raw = make_raw_order(orderDate=None, createdAt="2026-10-17T18:00:00Z")
        order = normalize_order(raw)
        assert order.placed_at == "2026-10-17T18:00:00Z"

    def test_same_input_gives_equal_orders(self):
        raw = make_raw_order("X", "In-Progress")
        assert normalize_order(raw) == normalize_order(raw)


class TestSentinels:
    """Missing customer data never raises."""

    def test_missing_customer_fields(self):
        raw = make_raw_order()
        del raw["customerName"]
        del raw["customerPhone"]
        del raw["deliveryAddress"]

        order = normalize_order(raw)

        assert order.customer == NO_NAME
        assert order.phone == NO_PHONE
        assert order.address == NO_ADDRESS

    def test_empty_strings_use_sentinels(self):
        order = normalize_order(make_raw_order(customerName="", customerPhone="  "))
        assert order.customer == NO_NAME
        assert order.phone == NO_PHONE

    def test_address_without_any_sub_field(self):
        order = normalize_order(make_raw_order(deliveryAddress={}))
        assert order.address == NO_ADDRESS

    def test_address_with_partial_sub_fields(self):
        order = normalize_order(make_raw_order(deliveryAddress={"society": "Palm Grove"}))
        assert order.address == ", Palm Grove, "

    def test_no_location(self):
        order = normalize_order(make_raw_order(customerLocation=None))
        assert order.location is None
        assert order.map_link is None

    def test_location_with_bad_coordinates(self):
        order = normalize_order(make_raw_order(customerLocation={"latitude": "north"}))
        assert order.location is None

    @pytest.mark.parametrize("raw", [None, "garbage", 42, [], {}])
    def test_non_record_input(self, raw):
        order = normalize_order(raw)

        assert order.id == ""
        assert order.customer == NO_NAME
        assert order.items == ()
        assert order.total == 0
        assert order.status is OrderStatus.PENDING


class TestTotals:
    """Authoritative total first, then sum of line totals."""

    def test_sum_of_line_totals_when_total_absent(self):
        raw = make_raw_order()
        del raw["orderTotal"]
        assert normalize_order(raw).total == 970

    def test_sum_when_order_total_has_no_total(self):
        assert normalize_order(make_raw_order(orderTotal={})).total == 970

    def test_empty_items_total_zero(self):
        raw = make_raw_order(orderItems=[])
        del raw["orderTotal"]
        order = normalize_order(raw)
        assert order.items == ()
        assert order.total == 0

    def test_authoritative_total_wins(self):
        assert normalize_order(make_raw_order(orderTotal={"total": 1010.5})).total == 1010.5

    def test_missing_items_key(self):
        raw = make_raw_order()
        del raw["orderItems"]
        del raw["orderTotal"]
        order = normalize_order(raw)
        assert order.items == ()
        assert order.total == 0

    def test_malformed_item_does_not_break_batch(self):
        raw = make_raw_order(
            orderItems=[None, {"name": "Milk", "quantity": "2", "price": "30"}],
            orderTotal=None,
        )
        order = normalize_order(raw)

        assert len(order.items) == 2
        assert order.items[0].name == ""
        # totalPrice missing -> quantity * price
        assert order.items[1].line_total == 60
        assert order.total == 60

    def test_total_never_negative(self):
        raw = make_raw_order(
            orderItems=[{"name": "Refund", "quantity": 1, "price": -50, "totalPrice": -50}],
            orderTotal={"total": -50},
        )
        assert normalize_order(raw).total == 0


class TestStatus:
    """Status lower-cased, anything unknown is pending."""

    @pytest.mark.parametrize("raw_status, expected", [
        ("pending", OrderStatus.PENDING),
        ("PENDING", OrderStatus.PENDING),
        ("In-Progress", OrderStatus.IN_PROGRESS),
        ("completed", OrderStatus.COMPLETED),
        ("Completed ", OrderStatus.COMPLETED),
    ])
    def test_known_statuses(self, raw_status, expected):
        assert normalize_order(make_raw_order(status=raw_status)).status is expected

    @pytest.mark.parametrize("raw_status", ["shipped", "in_progress", "", None, 3])
    def test_unknown_status_is_pending(self, raw_status):
        assert normalize_order(make_raw_order(status=raw_status)).status is OrderStatus.PENDING

    def test_lifecycle_actions(self):
        assert next_status(OrderStatus.PENDING) is OrderStatus.IN_PROGRESS
        assert next_status(OrderStatus.IN_PROGRESS) is OrderStatus.COMPLETED
        assert next_status(OrderStatus.COMPLETED) is None

    def test_labels(self):
        order = normalize_order(make_raw_order(status="in-progress"))
        assert order.status_label == "In-progress"
        assert order.action_label == "Mark Completed"


class TestDisplayHelpers:

    def test_map_link(self):
        order = normalize_order(make_raw_order())
        assert order.map_link == "https://www.google.com/maps?q=28.4595,77.0266"

    def test_placed_at_datetime(self):
        order = normalize_order(make_raw_order())
        parsed = order.placed_at_datetime
        assert parsed is not None
        assert (parsed.year, parsed.month, parsed.day, parsed.hour) == (2026, 10, 18, 9)

    def test_placed_at_not_iso(self):
        order = normalize_order(make_raw_order(orderDate="yesterday"))
        assert order.placed_at_datetime is None

    def test_to_dict(self):
        data = normalize_order(make_raw_order("A")).to_dict()

        assert data["id"] == "A"
        assert data["status"] == "pending"
        assert data["nextStatus"] == "in-progress"
        assert data["actionLabel"] == "Accept Order"
        assert data["items"][0]["unitPrice"] == 650
        assert data["location"] == {"latitude": 28.4595, "longitude": 77.0266}
