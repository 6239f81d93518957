from __future__ import annotations

from typing import Protocol

from ticket_monitor.domain.events.activity import ActivityEvent


class AttentionNotifier(Protocol):
    """Side channel cue (sound, desktop toast, log line) fired once per event."""

    def notify_attention_required(self, event: ActivityEvent) -> None: ...
