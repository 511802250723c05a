import logging
import threading
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    message: str
    level: NotificationLevel = NotificationLevel.INFO

    def to_json(self):
        return {"message": self.message, "level": self.level.value}


class Notifier:
    """Transient, dismissible messages queued for the client to show once."""

    def __init__(self):
        self._pending = []
        self._lock = threading.Lock()

    def show_message(self, message):
        self._post(Notification(message, NotificationLevel.INFO))

    def show_error(self, message):
        self._post(Notification(message, NotificationLevel.ERROR))

    def _post(self, notification):
        logger.debug(f"Notification ({notification.level.value}): {notification.message}")
        with self._lock:
            self._pending.append(notification)

    def peek(self):
        with self._lock:
            return list(self._pending)

    def drain(self):
        with self._lock:
            pending, self._pending = self._pending, []
        return pending


class Clipboard:
    """Last text the user copied in this session."""

    def __init__(self):
        self.text = None

    def set_text(self, text):
        self.text = text
