from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from ticket_monitor.domain.events.activity import ActivityEvent

DEFAULT_HISTORY_LIMIT = 100


class ActivityFeed:
    """Capped newest-first history of raw activity events for display."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._events: deque[ActivityEvent] = deque(maxlen=limit)

    def extend(self, events: Iterable[ActivityEvent]) -> None:
        # A cycle's events keep their relative order at the head of the feed.
        for event in reversed(list(events)):
            self._events.appendleft(event)

    def recent(self, limit: int | None = None) -> list[ActivityEvent]:
        items = list(self._events)
        return items if limit is None else items[:limit]

    def __len__(self) -> int:
        return len(self._events)
