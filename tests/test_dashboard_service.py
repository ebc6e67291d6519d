"""
Unit tests for the dashboard view-state service.
"""

import pytest
from unittest.mock import Mock

from core.exceptions import OrderFetchError
from models.notification import NotificationKind
from modules.derivations import ViewTab
from services.dashboard_service import DashboardService
from services.feedback import FeedbackChannel
from services.order_sync_service import OrderSyncService
from tests.conftest import make_raw_order


@pytest.fixture
def feedback(timers):
    return FeedbackChannel(timer_factory=timers)


@pytest.fixture
def dashboard(mock_api_client, feedback):
    sync = OrderSyncService(mock_api_client, feedback, poll_interval_seconds=10.0)
    service = DashboardService(sync, feedback)
    yield service
    service.unmount()


class TestSnapshot:

    def test_initial_snapshot(self, dashboard):
        snapshot = dashboard.snapshot()

        assert snapshot.orders == ()
        assert snapshot.filtered == ()
        assert snapshot.active_tab == "new"
        assert snapshot.search_term == ""
        assert snapshot.loading is False
        assert snapshot.error is None
        assert snapshot.notification is None
        assert snapshot.empty_message == "No new orders at the moment"

    def test_after_refresh(self, dashboard):
        dashboard.refresh()
        snapshot = dashboard.snapshot()

        assert snapshot.order_count == 2
        # Default tab is "new" -> pending only
        assert [o.id for o in snapshot.filtered] == ["A"]
        assert (snapshot.stats.pending, snapshot.stats.in_progress, snapshot.stats.completed) == (1, 0, 1)

    def test_stats_ignore_view(self, dashboard):
        dashboard.refresh()
        full = dashboard.snapshot().stats

        dashboard.set_search("ravi")
        dashboard.set_tab(ViewTab.COMPLETED)
        snapshot = dashboard.snapshot()

        assert [o.id for o in snapshot.filtered] == ["B"]
        assert snapshot.stats == full

    def test_failed_refresh_shows_error_and_toast(self, dashboard, mock_api_client):
        dashboard.refresh()
        mock_api_client.list_orders.side_effect = OrderFetchError("down")
        dashboard.refresh()

        snapshot = dashboard.snapshot()
        assert snapshot.order_count == 2
        assert snapshot.error is not None
        assert snapshot.notification.kind is NotificationKind.ERROR

    def test_to_dict(self, dashboard):
        dashboard.refresh()
        data = dashboard.snapshot().to_dict()

        assert data["orderCount"] == 2
        assert data["activeTab"] == "new"
        assert data["stats"]["totalSalesDisplay"] == "₹1,940"
        assert data["lastRefreshedAt"] is not None


class TestIntents:

    def test_set_tab_by_string(self, dashboard):
        dashboard.set_tab("all")
        assert dashboard.active_tab is ViewTab.ALL

    def test_set_tab_unknown(self, dashboard):
        with pytest.raises(ValueError):
            dashboard.set_tab("archived")

    def test_search_none_is_empty(self, dashboard):
        dashboard.set_search(None)
        assert dashboard.search_term == ""

    def test_set_status_delegates(self, dashboard, mock_api_client):
        mock_api_client.list_orders.return_value = [make_raw_order("A", "in-progress")]

        assert dashboard.set_status("A", "in-progress") is True

        snapshot = dashboard.snapshot()
        assert snapshot.notification.message == "Order status updated successfully!"
        assert snapshot.orders[0].status.value == "in-progress"


class TestObservers:

    def test_notified_on_view_change(self, dashboard):
        listener = Mock()
        dashboard.subscribe(listener)

        dashboard.set_search("asha")
        dashboard.set_tab("all")

        assert listener.call_count == 2

    def test_notified_on_sync_and_feedback(self, dashboard):
        listener = Mock()
        dashboard.subscribe(listener)

        dashboard.refresh()

        assert listener.call_count >= 2

    def test_unmount_detaches(self, dashboard):
        listener = Mock()
        dashboard.subscribe(listener)
        dashboard.unmount()

        dashboard.refresh()
        listener.assert_not_called()


class TestMount:

    def test_mount_starts_single_loop(self, dashboard):
        first = dashboard.mount()
        second = dashboard.mount()

        assert first is second
        assert dashboard.is_mounted

    def test_unmount_cancels(self, dashboard):
        handle = dashboard.mount()
        dashboard.unmount()

        assert handle.cancelled
        assert not dashboard.is_mounted

    def test_remount_reattaches_listeners(self, dashboard):
        dashboard.mount()
        dashboard.unmount()
        dashboard.mount()

        listener = Mock()
        dashboard.subscribe(listener)
        dashboard.refresh()

        # begin + end of the manual refresh
        assert listener.call_count >= 2
        assert dashboard.is_mounted
