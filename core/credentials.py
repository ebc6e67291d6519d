"""
Bearer credential storage.

The token is set at login and cleared at logout. The sync service reads it
on every request, so a token change takes effect on the next poll tick
without restarting anything.

Thread Safety:
    - get/set/clear are guarded by a lock (request threads write,
      the polling thread reads)
"""

from __future__ import annotations

import threading
from typing import Optional

from logging_config import get_logger


logger = get_logger(__name__)


class CredentialProvider:
    """
    Holds the operator's bearer token.

    One instance is created per app and injected into the API client;
    there is no process-global token.
    """

    def __init__(self, token: Optional[str] = None):
        self._lock = threading.Lock()
        self._token = token or None

    def get(self) -> Optional[str]:
        """Current token, or None when logged out."""
        with self._lock:
            return self._token

    def set(self, token: str) -> None:
        """Store a new token (login)."""
        with self._lock:
            self._token = token or None
        logger.info("Bearer credential stored")

    def clear(self) -> None:
        """Forget the token (logout)."""
        with self._lock:
            self._token = None
        logger.info("Bearer credential cleared")

    @property
    def has_token(self) -> bool:
        return self.get() is not None
