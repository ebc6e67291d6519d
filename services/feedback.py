"""
Single-slot toast notifications.

At most one notification is visible. show() replaces whatever is on screen
and schedules its own dismissal; a newer show() cancels the older timer, and
each timer carries the generation it was created for, so a late timer can
never hide a message that replaced its own.

Thread Safety:
    - State changes are guarded by a lock
    - Dismissal runs on a threading.Timer thread
    - Listeners are called outside the lock
"""

from __future__ import annotations

import threading
from typing import Callable, List, Optional

from models.notification import Notification, NotificationKind
from logging_config import get_logger


logger = get_logger(__name__)

DEFAULT_DURATION_SECONDS = 3.0

Listener = Callable[[], None]


class FeedbackChannel:
    """
    Transient notification slot decoupled from the sync service.

    The sync service only calls show(); whoever renders the dashboard
    subscribes and reads ``current``.
    """

    def __init__(
        self,
        duration_seconds: float = DEFAULT_DURATION_SECONDS,
        timer_factory: Callable[..., threading.Timer] = threading.Timer
    ):
        self._duration = duration_seconds
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._current: Optional[Notification] = None
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._listeners: List[Listener] = []

    @property
    def duration_seconds(self) -> float:
        return self._duration

    @property
    def current(self) -> Optional[Notification]:
        """Notification on screen right now, or None."""
        with self._lock:
            return self._current

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

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

    def show(self, message: str, kind: NotificationKind = NotificationKind.SUCCESS) -> Notification:
        """
        Display a notification, replacing any current one.

        Args:
            message: Text to show
            kind: SUCCESS or ERROR

        Returns:
            The notification now on screen
        """
        notification = Notification(message=message, kind=kind)

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()

            self._generation += 1
            self._current = notification

            timer = self._timer_factory(
                self._duration, self._expire, args=(self._generation,)
            )
            timer.daemon = True
            self._timer = timer
            timer.start()

        logger.debug(f"Notification ({kind.value}): {message}")
        self._notify()
        return notification

    def success(self, message: str) -> Notification:
        return self.show(message, NotificationKind.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.show(message, NotificationKind.ERROR)

    def dismiss(self) -> None:
        """Hide the current notification immediately."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            had_notification = self._current is not None
            self._current = None
            self._generation += 1

        if had_notification:
            self._notify()

    def close(self) -> None:
        """Cancel any pending dismissal timer (app shutdown)."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _expire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                # Superseded by a newer show()
                return
            self._current = None
            self._timer = None

        self._notify()

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener()
            except Exception as e:
                logger.error(f"Notification listener failed: {e}", exc_info=True)
