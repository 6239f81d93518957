"""Aggregates computed from the committed ticket snapshot."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ticket_monitor.domain.entities.ticket import TicketSnapshot
from ticket_monitor.domain.value_objects.enums import TicketPriority, TicketStatus
from ticket_monitor.domain.value_objects.ids import UserId

_SECONDS_PER_DAY = 86_400


@dataclass(frozen=True, slots=True)
class SnapshotStats:
    total: int
    by_status: dict[str, int]
    by_priority: dict[str, int]
    unassigned: int


@dataclass(frozen=True, slots=True)
class TechnicianPerformance:
    technician_id: UserId
    name: str
    total: int
    resolved: int
    in_progress: int
    open: int
    resolution_rate: float
    avg_resolution_days: float


def compute_stats(tickets: Iterable[TicketSnapshot]) -> SnapshotStats:
    by_status = {str(s): 0 for s in TicketStatus}
    by_priority = {str(p): 0 for p in TicketPriority}
    total = unassigned = 0
    for ticket in tickets:
        total += 1
        by_status[str(ticket.status)] += 1
        by_priority[str(ticket.priority)] += 1
        if ticket.assigned_to is None:
            unassigned += 1
    return SnapshotStats(
        total=total, by_status=by_status, by_priority=by_priority, unassigned=unassigned,
    )


def compute_performance(tickets: Iterable[TicketSnapshot]) -> list[TechnicianPerformance]:
    """Per-assignee workload, busiest first.

    ``resolution_rate`` is a percentage of the assignee's tickets in
    ``resolvido``. Resolution time is ``updated_at - created_at`` of those
    tickets, averaged in days.
    """
    grouped: dict[UserId, list[TicketSnapshot]] = {}
    names: dict[UserId, str] = {}
    for ticket in tickets:
        if ticket.assigned_to is None:
            continue
        grouped.setdefault(ticket.assigned_to.id, []).append(ticket)
        names[ticket.assigned_to.id] = ticket.assigned_to.name

    result = []
    for tech_id, owned in grouped.items():
        resolved = [t for t in owned if t.status == TicketStatus.RESOLVED]
        days = [
            (t.updated_at - t.created_at).total_seconds() / _SECONDS_PER_DAY for t in resolved
        ]
        result.append(
            TechnicianPerformance(
                technician_id=tech_id,
                name=names[tech_id],
                total=len(owned),
                resolved=len(resolved),
                in_progress=sum(1 for t in owned if t.status == TicketStatus.IN_PROGRESS),
                open=sum(1 for t in owned if t.status == TicketStatus.OPEN),
                resolution_rate=len(resolved) / len(owned) * 100,
                avg_resolution_days=sum(days) / len(days) if days else 0.0,
            )
        )
    result.sort(key=lambda p: (-p.total, p.technician_id))
    return result
