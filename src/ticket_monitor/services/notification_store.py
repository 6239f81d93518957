from __future__ import annotations

import dataclasses
import logging
from collections import deque
from collections.abc import Callable, Iterator

from ticket_monitor.domain.entities.notification import Notification

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100

NotificationListener = Callable[[Notification], None]


class NotificationStore:
    """Bounded newest-first notification log with read/unread state.

    Once ``capacity`` is exceeded the oldest entry is evicted. Every operation
    is total: marking an unknown id is a no-op.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._items: deque[Notification] = deque(maxlen=capacity)
        self._listeners: list[NotificationListener] = []

    @property
    def capacity(self) -> int:
        return self._items.maxlen or 0

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.read)

    def add_listener(self, listener: NotificationListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: NotificationListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def append(self, notification: Notification) -> None:
        self._items.appendleft(notification)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                logger.exception("Notification listener failed for %s", notification.id)

    def get(self, notification_id: str) -> Notification | None:
        for n in self._items:
            if n.id == notification_id:
                return n
        return None

    def mark_read(self, notification_id: str) -> None:
        for idx in range(len(self._items)):
            n = self._items[idx]
            if n.id == notification_id:
                if not n.read:
                    self._items[idx] = dataclasses.replace(n, read=True)
                return

    def mark_all_read(self) -> None:
        for idx in range(len(self._items)):
            n = self._items[idx]
            if not n.read:
                self._items[idx] = dataclasses.replace(n, read=True)

    def clear(self) -> None:
        self._items.clear()

    def __iter__(self) -> Iterator[Notification]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)
