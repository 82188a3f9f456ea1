"""Dismissible user notifications (toasts) raised by the board controllers."""

import itertools
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class Level(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    id: int
    level: Level
    message: str
    dismissed: bool = False
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


_LOG_LEVELS = {
    Level.INFO: logging.INFO,
    Level.SUCCESS: logging.INFO,
    Level.WARNING: logging.WARNING,
    Level.ERROR: logging.WARNING,
}


class Notifier:
    """Keeps the most recent notifications and fans new ones out to subscribers."""

    def __init__(self, limit: int = 50):
        self.limit = limit
        self._items: list[Notification] = []
        self._ids = itertools.count(1)
        self._subscribers: list[Callable[[Notification], None]] = []

    def subscribe(self, callback: Callable[[Notification], None]) -> None:
        self._subscribers.append(callback)

    def notify(self, level: Level, message: str) -> Notification:
        notification = Notification(id=next(self._ids), level=level, message=message)
        self._items.append(notification)
        del self._items[:-self.limit]
        logger.log(_LOG_LEVELS[level], "[%s] %s", level.value, message)
        for callback in self._subscribers:
            try:
                callback(notification)
            except Exception:
                logger.exception("Notification subscriber failed")
        return notification

    def info(self, message: str) -> Notification:
        return self.notify(Level.INFO, message)

    def success(self, message: str) -> Notification:
        return self.notify(Level.SUCCESS, message)

    def warning(self, message: str) -> Notification:
        return self.notify(Level.WARNING, message)

    def error(self, message: str) -> Notification:
        return self.notify(Level.ERROR, message)

    def active(self) -> list[Notification]:
        return [n for n in self._items if not n.dismissed]

    def dismiss(self, notification_id: int) -> bool:
        for n in self._items:
            if n.id == notification_id and not n.dismissed:
                n.dismissed = True
                return True
        return False
