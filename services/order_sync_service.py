"""
Order sync service with background polling.

This service owns the authoritative in-memory order set. It fetches the
storefront's order list, normalizes every record, and swaps the whole set in
one assignment. Status changes are sent to the storefront and followed by a
full refetch - the local set is never edited in place.

REFRESH:
    - Fetch GET /orders, normalize every record, then swap the whole set
    - On failure the previous set stays, the error flag is set and one
      error notification is shown
    - A record without an id is skipped; one bad record never drops the batch

POLLING:
    - schedule_polling() returns a PollingHandle; refresh runs immediately,
      then every interval until handle.cancel()
    - A refresh still in flight when the handle is cancelled finishes its
      network call, but its result is discarded

Thread Safety:
    - The order set is an immutable tuple replaced by reference under a lock
    - ``loading`` is backed by an in-flight counter, so a refresh finishing
      while set_status is still running does not clear it early
    - Overlapping refreshes: the last one to complete wins

Usage:
    sync = OrderSyncService(api_client, feedback)
    handle = sync.schedule_polling(30.0)

    state = sync.get_state()
    sync.set_status(order_id, OrderStatus.IN_PROGRESS)

    handle.cancel()
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from core.api_client import OrdersAPIClient
from core.exceptions import InvalidStatusError, StatusUpdateError
from models.order import Order, OrderStatus, normalize_order
from services.feedback import FeedbackChannel
from logging_config import get_logger, set_thread_name


logger = get_logger(__name__)

FETCH_ERROR_MESSAGE = "Failed to load orders. Please try again."
FETCH_ERROR_TOAST = "Error loading orders"
UPDATE_SUCCESS_TOAST = "Order status updated successfully!"
UPDATE_ERROR_TOAST = "Failed to update order status"

Listener = Callable[[], None]


@dataclass(frozen=True)
class SyncState:
    """Point-in-time view of the sync service."""

    orders: Tuple[Order, ...] = ()
    loading: bool = False
    error: Optional[str] = None
    last_refreshed_at: Optional[datetime] = None

    def get_order(self, order_id: str) -> Optional[Order]:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None


def build_order_set(raw_orders: Iterable[Any]) -> Tuple[Order, ...]:
    """
    Normalize a fetched list into an id-keyed order set.

    A duplicate id replaces the earlier entry (keeping its position);
    records without an id are skipped.
    """
    by_id: Dict[str, Order] = {}
    skipped = 0

    for raw in raw_orders:
        order = normalize_order(raw)
        if not order.id:
            skipped += 1
            continue
        by_id[order.id] = order

    if skipped:
        logger.warning(f"Skipped {skipped} order record(s) without an id")

    return tuple(by_id.values())


def _coerce_status(status: Union[OrderStatus, str]) -> OrderStatus:
    if isinstance(status, OrderStatus):
        return status
    if isinstance(status, str):
        lowered = status.strip().lower()
        for member in OrderStatus:
            if member.value == lowered:
                return member
    raise InvalidStatusError(status)


class PollingHandle:
    """
    One cancellable polling loop.

    The loop calls ``refresh(cancel_event)`` immediately and then every
    ``interval_seconds``. After cancel() no further refresh is started.

    Attributes:
        interval_seconds: Time between refreshes
    """

    def __init__(
        self,
        refresh: Callable[[threading.Event], Any],
        interval_seconds: float,
        name: str = "OrderPoller"
    ):
        self.interval_seconds = interval_seconds
        self._refresh = refresh
        self._name = name
        self._cancel_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def is_active(self) -> bool:
        """Whether the loop is started and not cancelled."""
        return self._thread is not None and not self.cancelled

    def start(self) -> "PollingHandle":
        """Start the polling thread. Safe to call more than once."""
        if self._thread is not None:
            return self

        self._thread = threading.Thread(
            target=self._run,
            name=self._name,
            daemon=True  # Thread will exit when main process exits
        )
        self._thread.start()
        logger.info(f"Order polling started (interval: {self.interval_seconds}s)")
        return self

    def cancel(self, timeout: float = 5.0) -> None:
        """
        Stop the loop. No refresh starts after this returns.

        Waits up to ``timeout`` seconds for an in-flight refresh to finish;
        its result is discarded either way. Safe to call multiple times.
        """
        if self._cancel_event.is_set():
            return

        self._cancel_event.set()

        thread = self._thread
        if thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("Order polling thread did not stop cleanly")

        logger.info("Order polling stopped")

    def _run(self) -> None:
        set_thread_name(self._name)
        logger.debug("Order polling loop starting")

        self._refresh(self._cancel_event)

        while not self._cancel_event.wait(timeout=self.interval_seconds):
            self._refresh(self._cancel_event)

        logger.debug("Order polling loop exiting")


class OrderSyncService:
    """
    Owner of the order set, the loading flag and the error flag.

    The presentation layer reads get_state() and subscribes for change
    notifications; it never writes to the order set directly.

    Attributes:
        poll_interval_seconds: Default interval for schedule_polling()
    """

    def __init__(
        self,
        api_client: OrdersAPIClient,
        feedback: FeedbackChannel,
        poll_interval_seconds: float = 30.0
    ):
        self._api = api_client
        self._feedback = feedback
        self.poll_interval_seconds = poll_interval_seconds

        self._lock = threading.Lock()
        self._orders: Tuple[Order, ...] = ()
        self._error: Optional[str] = None
        self._in_flight = 0
        self._last_refreshed_at: Optional[datetime] = None
        self._listeners: List[Listener] = []
        self._poller: Optional[PollingHandle] = None
        # Guards the check-and-start in schedule_polling()
        self._poller_lock = threading.Lock()

        # Track consecutive failures for logging
        self._consecutive_failures = 0

        logger.info(
            f"OrderSyncService initialized (poll interval: {poll_interval_seconds}s)"
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_state(self) -> SyncState:
        with self._lock:
            return SyncState(
                orders=self._orders,
                loading=self._in_flight > 0,
                error=self._error,
                last_refreshed_at=self._last_refreshed_at,
            )

    @property
    def orders(self) -> Tuple[Order, ...]:
        with self._lock:
            return self._orders

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._in_flight > 0

    @property
    def error(self) -> Optional[str]:
        with self._lock:
            return self._error

    @property
    def is_polling(self) -> bool:
        poller = self._poller
        return poller is not None and poller.is_active

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a state-change listener.

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
    # Operations
    # -------------------------------------------------------------------------

    def refresh(self, cancel_event: Optional[threading.Event] = None) -> bool:
        """
        Fetch and replace the whole order set.

        Args:
            cancel_event: Set by a cancelled polling loop; when set by the
                time the fetch completes, the result is dropped silently

        Returns:
            True if the order set was replaced, False otherwise
        """
        self._begin()
        try:
            raw_orders = self._api.list_orders()
            orders = build_order_set(raw_orders)

        except Exception as e:
            if cancel_event is not None and cancel_event.is_set():
                logger.debug(f"Discarding failed refresh after cancellation: {e}")
                return False

            self._log_failure(e)
            with self._lock:
                self._error = FETCH_ERROR_MESSAGE
            self._feedback.error(FETCH_ERROR_TOAST)
            return False

        else:
            if cancel_event is not None and cancel_event.is_set():
                logger.debug("Discarding refresh result after cancellation")
                return False

            with self._lock:
                # Single reference swap - last refresh to complete wins
                self._orders = orders
                self._error = None
                self._last_refreshed_at = datetime.now(timezone.utc)
                recovered_after = self._consecutive_failures
                self._consecutive_failures = 0

            if recovered_after > 0:
                logger.info(f"Order refresh recovered after {recovered_after} failures")

            # DEBUG level: this runs every poll tick
            logger.debug(f"Orders refreshed: {len(orders)} orders")
            return True

        finally:
            self._end()

    def set_status(self, order_id: str, status: Union[OrderStatus, str]) -> bool:
        """
        Move one order to a new status on the storefront, then refetch.

        The local entry is not touched: after a successful update the full
        refresh decides what the order now looks like. On failure nothing is
        refetched and the order keeps showing its previous status.

        Args:
            order_id: Remote order identifier
            status: Target status (OrderStatus or its string value)

        Returns:
            True if the storefront accepted the update

        Raises:
            InvalidStatusError: If status is not a lifecycle value
                (raised before any network call)
        """
        new_status = _coerce_status(status)

        self._begin()
        try:
            self._api.update_status(order_id, new_status.value)

        except StatusUpdateError as e:
            logger.warning(f"Status update for {order_id} failed: {e}")
            message = UPDATE_ERROR_TOAST
            if e.server_message:
                message = f"{UPDATE_ERROR_TOAST}: {e.server_message}"
            self._feedback.error(message)
            return False

        except Exception as e:
            logger.error(f"Status update for {order_id} failed unexpectedly: {e}", exc_info=True)
            self._feedback.error(UPDATE_ERROR_TOAST)
            return False

        else:
            logger.info(f"Order {order_id} -> {new_status.value} accepted by storefront")
            self._feedback.success(UPDATE_SUCCESS_TOAST)
            self.refresh()
            return True

        finally:
            self._end()

    def schedule_polling(self, interval_seconds: Optional[float] = None) -> PollingHandle:
        """
        Start the polling loop: refresh now, then every interval.

        Only one loop is active at a time; if one is already running it is
        returned unchanged.

        Args:
            interval_seconds: Override for poll_interval_seconds

        Returns:
            PollingHandle whose cancel() stops the loop
        """
        with self._poller_lock:
            poller = self._poller
            if poller is not None and poller.is_active:
                logger.warning("Order polling already running")
                return poller

            interval = interval_seconds if interval_seconds is not None else self.poll_interval_seconds
            self._poller = PollingHandle(self.refresh, interval)
            return self._poller.start()

    def stop_polling(self) -> None:
        """Cancel the active polling loop, if any."""
        with self._poller_lock:
            poller = self._poller
        if poller is not None:
            poller.cancel()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _begin(self) -> None:
        with self._lock:
            self._in_flight += 1
        self._notify()

    def _end(self) -> None:
        with self._lock:
            self._in_flight -= 1
        self._notify()

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener()
            except Exception as e:
                logger.error(f"Sync listener failed: {e}", exc_info=True)

    def _log_failure(self, error: Exception) -> None:
        with self._lock:
            self._consecutive_failures += 1
            failures = self._consecutive_failures

        # Log with increasing severity based on consecutive failures
        if failures == 1:
            logger.warning(f"Order refresh failed: {error}")
        elif failures <= 3:
            logger.error(
                f"Order refresh failed ({failures} consecutive): {error}"
            )
        elif failures % 5 == 0:
            # Only log every 5th failure after that to avoid spam
            logger.error(
                f"Order refresh still failing ({failures} consecutive): {error}"
            )
