from __future__ import annotations

import asyncio

from ticket_monitor.application.dto.viewer import Viewer
from ticket_monitor.application.policies.visibility import is_notification_visible
from ticket_monitor.domain.entities.notification import Notification
from ticket_monitor.services.notification_store import DEFAULT_CAPACITY, NotificationStore


class NotificationSubscription:
    """Per-viewer stream of new notifications.

    Registered on creation, so nothing appended after ``subscribe`` returns is
    missed. Use as ``async for n in subscription`` and ``close()`` when done.
    At most ``maxsize`` undelivered notifications are held; a reader that
    falls behind loses the oldest ones first, like the store itself.
    """

    def __init__(
        self, store: NotificationStore, viewer: Viewer, *, maxsize: int = DEFAULT_CAPACITY,
    ) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be positive")
        self._store = store
        self._viewer = viewer
        self._queue: asyncio.Queue[Notification | None] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0
        self._closed = False
        store.add_listener(self._on_notification)

    @property
    def viewer(self) -> Viewer:
        return self._viewer

    def _on_notification(self, notification: Notification) -> None:
        if self._closed:
            return
        # Delivered inside the cycle, so the event already holds the current ticket.
        if is_notification_visible(self._viewer, notification):
            self._push(notification)

    def pending(self) -> list[Notification]:
        """Drain whatever arrived without waiting."""
        items: list[Notification] = []
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if item is not None:
                items.append(item)
        return items

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._store.remove_listener(self._on_notification)
        self._push(None)

    def _push(self, item: Notification | None) -> None:
        if self._queue.full():
            self._queue.get_nowait()
            self.dropped += 1
        self._queue.put_nowait(item)

    def __aiter__(self) -> NotificationSubscription:
        return self

    async def __anext__(self) -> Notification:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is None:
            raise StopAsyncIteration
        return item
