# storefront/services/notifier.py

"""User-visible notifications with key-based deduplication."""

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from storefront.config.settings import Settings

logger = logging.getLogger("storefront.notifier")

# Severities mirror Textual's notify() levels
INFORMATION = "information"
WARNING = "warning"
ERROR = "error"


@dataclass
class Notification:
    """One message shown to the user."""

    message: str
    severity: str = INFORMATION
    key: str | None = None
    created_at: datetime = field(default_factory=datetime.now)


Listener = Callable[[Notification], None]


class Notifier:
    """Collects notifications and fans them out to listeners.

    A notification raised with a ``key`` replaces any earlier one with
    the same key, so repeated triggers (such as a low-stock alert for
    the same item) never multiply.  Unkeyed notifications land in a
    bounded history; the oldest drop off once it is full.
    """

    def __init__(self, history: int | None = None) -> None:
        self._active: dict[str, Notification] = {}
        self._recent: deque[Notification] = deque(
            maxlen=history or Settings.NOTIFICATION_HISTORY
        )
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked for every new notification."""
        self._listeners.append(listener)

    def notify(
        self,
        message: str,
        severity: str = INFORMATION,
        key: str | None = None,
    ) -> Notification:
        """Record a notification and forward it to listeners.

        Re-raising a keyed notification with an unchanged message
        refreshes the stored entry but is not forwarded again.
        """
        note = Notification(message=message, severity=severity, key=key)
        if key is None:
            self._recent.append(note)
        else:
            previous = self._active.get(key)
            self._active[key] = note
            if previous is not None and previous.message == message:
                return note
        logger.debug("Notification [%s] %s", severity, message)
        for listener in self._listeners:
            listener(note)
        return note

    def success(self, message: str) -> Notification:
        return self.notify(message, INFORMATION)

    def warning(self, message: str, key: str | None = None) -> Notification:
        return self.notify(message, WARNING, key)

    def error(self, message: str, key: str | None = None) -> Notification:
        return self.notify(message, ERROR, key)

    @property
    def notifications(self) -> list[Notification]:
        """Keyed notifications, then the recent unkeyed history."""
        return [*self._active.values(), *self._recent]

    def with_prefix(self, prefix: str) -> list[Notification]:
        """Active keyed notifications whose key starts with *prefix*."""
        return [
            n for key, n in self._active.items() if key.startswith(prefix)
        ]

    def dismiss(self, key: str) -> bool:
        """Drop a keyed notification; returns whether it existed."""
        return self._active.pop(key, None) is not None

    def dismiss_prefix(self, prefix: str, keep: set[str] | None = None) -> int:
        """Drop keyed notifications under *prefix* not listed in *keep*."""
        stale = [
            key for key in self._active
            if key.startswith(prefix) and key not in (keep or set())
        ]
        for key in stale:
            del self._active[key]
        return len(stale)

    def clear(self) -> int:
        """Drop all notifications and return how many were removed."""
        count = len(self._active) + len(self._recent)
        self._active.clear()
        self._recent.clear()
        return count
