from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone

from ticket_monitor.domain.entities.ticket import TicketSnapshot
from ticket_monitor.domain.events.activity import (
    ActivityEvent,
    CommentAdded,
    InteractionAdded,
    QueueTransferred,
    StatusChanged,
    TicketAccepted,
    TicketAssigned,
    TicketCreated,
)
from ticket_monitor.domain.value_objects.enums import (
    ACCEPTABLE_STATUSES,
    STRUCTURAL_INTERACTION_TYPES,
    UNASSIGNED_QUEUE,
    TicketStatus,
)
from ticket_monitor.domain.value_objects.ids import TicketId


def normalize_queue(queue: str | None) -> str:
    return queue or UNASSIGNED_QUEUE


def diff_snapshots(
    previous: Mapping[TicketId, TicketSnapshot],
    current: Mapping[TicketId, TicketSnapshot],
    *,
    now: datetime | None = None,
) -> list[ActivityEvent]:
    """Diff two ticket snapshots.

    Args:
        previous: Mapping of ticket id -> TicketSnapshot from the last cycle.
        current: Mapping of ticket id -> TicketSnapshot just fetched.
        now: Timestamp stamped on every event except ``InteractionAdded``
            and ``CommentAdded``, which carry their own ``created_at``.

    Returns:
        Events in ``current`` iteration order. An empty ``previous`` is a
        baseline, not a burst of creations, so it yields nothing. Tickets
        missing from ``current`` are not reported.
    """
    if not previous:
        return []

    ts = now or datetime.now(timezone.utc)
    events: list[ActivityEvent] = []

    for ticket_id, new in current.items():
        old = previous.get(ticket_id)
        if old is None:
            events.append(TicketCreated(ticket=new, occurred_at=ts))
            continue
        events.extend(_diff_ticket(old, new, ts))

    return events


def _diff_ticket(old: TicketSnapshot, new: TicketSnapshot, ts: datetime) -> list[ActivityEvent]:
    # Every check runs; several events per ticket per cycle is expected.
    events: list[ActivityEvent] = []

    if old.status != new.status:
        events.append(StatusChanged(ticket=new, occurred_at=ts, old=old.status, new=new.status))

    if old.assignee_id != new.assignee_id:
        events.append(
            TicketAssigned(ticket=new, occurred_at=ts, old=old.assigned_to, new=new.assigned_to)
        )

    old_queue = normalize_queue(old.queue)
    new_queue = normalize_queue(new.queue)
    if old_queue != new_queue:
        events.append(QueueTransferred(ticket=new, occurred_at=ts, old=old_queue, new=new_queue))

    if len(new.interactions) > len(old.interactions):
        seen = {i.id for i in old.interactions}
        for interaction in new.interactions:
            if interaction.id in seen or interaction.type in STRUCTURAL_INTERACTION_TYPES:
                continue
            events.append(
                InteractionAdded(
                    ticket=new,
                    occurred_at=interaction.created_at,
                    interaction=interaction,
                )
            )

    if len(new.comments) > len(old.comments):
        seen_comments = {c.id for c in old.comments}
        for comment in new.comments:
            if comment.id not in seen_comments:
                events.append(
                    CommentAdded(ticket=new, occurred_at=comment.created_at, comment=comment)
                )

    if (
        old.status in ACCEPTABLE_STATUSES
        and new.status == TicketStatus.IN_SERVICE
        and new.assigned_to is not None
        and new.assignee_id != old.assignee_id
    ):
        events.append(TicketAccepted(ticket=new, occurred_at=ts, new_assignee=new.assigned_to))

    return events
