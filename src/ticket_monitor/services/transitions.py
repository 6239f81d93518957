from __future__ import annotations

from ticket_monitor.domain.value_objects.enums import TicketStatus

TransitionMatrix = dict[str, dict[str, int]]


class TransitionAccumulator:
    """Running from -> to status counts. Increment only, in-memory only."""

    def __init__(self) -> None:
        self._counts: TransitionMatrix = {}
        self._total = 0

    def record(self, from_status: TicketStatus | str, to_status: TicketStatus | str) -> None:
        row = self._counts.setdefault(str(from_status), {})
        key = str(to_status)
        row[key] = row.get(key, 0) + 1
        self._total += 1

    def count(self, from_status: TicketStatus | str, to_status: TicketStatus | str) -> int:
        return self._counts.get(str(from_status), {}).get(str(to_status), 0)

    @property
    def total(self) -> int:
        return self._total

    def snapshot(self) -> TransitionMatrix:
        return {src: dict(row) for src, row in self._counts.items()}
