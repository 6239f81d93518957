from __future__ import annotations

from dataclasses import dataclass, field

from ticket_monitor.application.exceptions import MalformedSnapshotError
from ticket_monitor.domain.entities.ticket import TicketSnapshot


@dataclass(frozen=True, slots=True)
class TicketBatch:
    """Result of one fetch: the tickets that parsed and the ones that did not."""

    tickets: tuple[TicketSnapshot, ...]
    rejected: tuple[MalformedSnapshotError, ...] = field(default_factory=tuple)
