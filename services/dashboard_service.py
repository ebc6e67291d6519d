"""
Dashboard view-state and snapshot service.

Combines the order sync service, the feedback channel and the operator's
two view inputs (search term and active tab) into one DashboardSnapshot.
Derived data is recomputed on every snapshot() call.

Observer model:
    - The sync service and feedback channel notify this service on change
    - This service re-emits to its own subscribers (and on view changes)
    - Subscribers pull snapshot() - they never get pushed partial state
"""

from __future__ import annotations

import threading
from typing import Callable, List, Optional, Union

from models.order import OrderStatus
from models.snapshot import DashboardSnapshot
from modules.derivations import (
    ViewTab,
    compute_stats,
    empty_state_message,
    filter_orders,
)
from services.feedback import FeedbackChannel
from services.order_sync_service import OrderSyncService, PollingHandle
from logging_config import get_logger


logger = get_logger(__name__)

Listener = Callable[[], None]


class DashboardService:
    """
    Entry point for presentation-layer intents.

    Intents: set_search(), set_tab(), set_status(), refresh(),
    mount()/unmount() for the polling loop.
    """

    def __init__(
        self,
        sync_service: OrderSyncService,
        feedback: FeedbackChannel,
        initial_tab: ViewTab = ViewTab.NEW
    ):
        self._sync = sync_service
        self._feedback = feedback

        self._lock = threading.Lock()
        self._search_term = ""
        self._active_tab = initial_tab
        self._listeners: List[Listener] = []
        self._polling: Optional[PollingHandle] = None

        self._unsubscribers: List[Callable[[], None]] = []
        self._attach()

    @property
    def sync_service(self) -> OrderSyncService:
        return self._sync

    @property
    def search_term(self) -> str:
        with self._lock:
            return self._search_term

    @property
    def active_tab(self) -> ViewTab:
        with self._lock:
            return self._active_tab

    @property
    def is_mounted(self) -> bool:
        polling = self._polling
        return polling is not None and polling.is_active

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    def snapshot(self) -> DashboardSnapshot:
        """Build a fresh, self-consistent snapshot of the dashboard."""
        state = self._sync.get_state()
        with self._lock:
            search_term = self._search_term
            tab = self._active_tab

        return DashboardSnapshot(
            orders=state.orders,
            filtered=filter_orders(state.orders, search_term, tab),
            stats=compute_stats(state.orders),
            search_term=search_term,
            active_tab=tab.value,
            loading=state.loading,
            error=state.error,
            notification=self._feedback.current,
            empty_message=empty_state_message(search_term, tab),
            last_refreshed_at=state.last_refreshed_at,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called whenever the snapshot may have changed.

        Returns:
            Callable that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Intents
    # -------------------------------------------------------------------------

    def set_search(self, search_term: str) -> None:
        with self._lock:
            self._search_term = search_term or ""
        self._notify()

    def set_tab(self, tab: Union[ViewTab, str]) -> None:
        """
        Switch the active tab.

        Raises:
            ValueError: If tab is not a known tab value
        """
        if not isinstance(tab, ViewTab):
            tab = ViewTab.parse(tab)
        with self._lock:
            self._active_tab = tab
        self._notify()

    def set_status(self, order_id: str, status: Union[OrderStatus, str]) -> bool:
        return self._sync.set_status(order_id, status)

    def refresh(self) -> bool:
        """Manual retry after a failed fetch."""
        return self._sync.refresh()

    def mount(self, interval_seconds: Optional[float] = None) -> PollingHandle:
        """Start polling for this view (no-op if already polling)."""
        self._attach()
        if self._polling is None or not self._polling.is_active:
            self._polling = self._sync.schedule_polling(interval_seconds)
        return self._polling

    def unmount(self) -> None:
        """Stop polling and detach from the sync service and feedback channel."""
        if self._polling is not None:
            self._polling.cancel()
            self._polling = None

        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

        logger.info("Dashboard unmounted")

    def _attach(self) -> None:
        # No-op while subscribed; a remount after unmount subscribes again
        if self._unsubscribers:
            return
        self._unsubscribers = [
            self._sync.subscribe(self._notify),
            self._feedback.subscribe(self._notify),
        ]

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener()
            except Exception as e:
                logger.error(f"Dashboard listener failed: {e}", exc_info=True)
