"""
Notification channel

User-facing toast events emitted by the session controller. The display
layer subscribes and renders them; the channel only records and fans out.
"""

import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .logging import get_logger

logger = get_logger(__name__, component="notifications")


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True)
class Notification:
    id: str
    kind: NotificationKind
    message: str
    duration: Optional[float] = None


Listener = Callable[[Notification], None]


class NotificationChannel:
    """Fan-out of notifications to subscribed listeners.

    ``active`` holds notifications that were emitted and not yet dismissed,
    ``history`` every notification ever emitted on this channel.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] = []
        self.active: List[Notification] = []
        self.history: List[Notification] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def emit(
        self,
        message: str,
        kind: NotificationKind = NotificationKind.INFO,
        duration: Optional[float] = None,
    ) -> str:
        notification = Notification(
            id=f"toast-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}",
            kind=kind,
            message=message,
            duration=duration,
        )
        self.active.append(notification)
        self.history.append(notification)
        logger.debug(f"[{kind.value}] {message}")
        for listener in list(self._listeners):
            listener(notification)
        return notification.id

    def dismiss(self, notification_id: str) -> None:
        self.active = [n for n in self.active if n.id != notification_id]

    def success(self, message: str, duration: Optional[float] = None) -> str:
        return self.emit(message, NotificationKind.SUCCESS, duration)

    def error(self, message: str, duration: Optional[float] = None) -> str:
        return self.emit(message, NotificationKind.ERROR, duration)

    def info(self, message: str, duration: Optional[float] = None) -> str:
        return self.emit(message, NotificationKind.INFO, duration)

    def warning(self, message: str, duration: Optional[float] = None) -> str:
        return self.emit(message, NotificationKind.WARNING, duration)

    def of_kind(self, kind: NotificationKind) -> List[Notification]:
        return [n for n in self.history if n.kind == kind]
