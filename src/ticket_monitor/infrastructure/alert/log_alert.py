from __future__ import annotations

import logging
from collections import Counter

from ticket_monitor.domain.events.activity import ActivityEvent

logger = logging.getLogger(__name__)


class LoggingAttentionNotifier:
    """Implements application.ports.alert.AttentionNotifier with a log line per event."""

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level
        self.counts: Counter[str] = Counter()

    def notify_attention_required(self, event: ActivityEvent) -> None:
        self.counts[event.kind] += 1
        logger.log(
            self._level,
            "Ticket #%s: %s",
            event.ticket.id,
            event.kind,
        )
