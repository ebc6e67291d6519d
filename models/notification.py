"""
Transient notification (toast) model.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any


class NotificationKind(Enum):
    """Visual kind of a toast."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A single toast message currently on screen."""

    message: str
    kind: NotificationKind = NotificationKind.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "kind": self.kind.value}
