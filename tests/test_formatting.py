"""
Unit tests for display formatting helpers.
"""

import pytest

from modules.formatting import format_price, google_maps_link


class TestFormatPrice:

    @pytest.mark.parametrize("amount, expected", [
        (0, "₹0"),
        (970, "₹970"),
        (1000, "₹1,000"),
        (99999, "₹99,999"),
        (100000, "₹1,00,000"),
        (12345678, "₹1,23,45,678"),
        (123456.6, "₹1,23,457"),
        (2.5, "₹3"),
        (-50, "-₹50"),
    ])
    def test_indian_grouping_whole_rupees(self, amount, expected):
        assert format_price(amount) == expected

    def test_not_a_number(self):
        assert format_price(float("nan")) == "₹0"


def test_google_maps_link():
    assert google_maps_link(12.9716, 77.5946) == "https://www.google.com/maps?q=12.9716,77.5946"
