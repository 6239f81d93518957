from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ticket_monitor.domain.events.activity import (
    ActivityEvent,
    CommentAdded,
    InteractionAdded,
    QueueTransferred,
    StatusChanged,
    TicketAccepted,
    TicketAssigned,
)


class ActivityResponse(BaseModel):
    kind: str
    ticket_id: str
    ticket_title: str
    occurred_at: datetime
    old_status: str | None = None
    new_status: str | None = None
    old_assignee: str | None = None
    new_assignee: str | None = None
    old_queue: str | None = None
    new_queue: str | None = None
    interaction_id: str | None = None
    interaction_content: str | None = None
    comment_id: str | None = None
    comment_content: str | None = None

    @classmethod
    def from_event(cls, event: ActivityEvent) -> ActivityResponse:
        data: dict[str, object] = {
            "kind": event.kind,
            "ticket_id": event.ticket.id,
            "ticket_title": event.ticket.title,
            "occurred_at": event.occurred_at,
        }
        if isinstance(event, StatusChanged):
            data.update(old_status=event.old, new_status=event.new)
        elif isinstance(event, TicketAssigned):
            data.update(
                old_assignee=event.old.id if event.old else None,
                new_assignee=event.new.id if event.new else None,
            )
        elif isinstance(event, QueueTransferred):
            data.update(old_queue=event.old, new_queue=event.new)
        elif isinstance(event, InteractionAdded):
            data.update(
                interaction_id=event.interaction.id,
                interaction_content=event.interaction.content,
            )
        elif isinstance(event, CommentAdded):
            data.update(comment_id=event.comment.id, comment_content=event.comment.content)
        elif isinstance(event, TicketAccepted):
            data.update(new_assignee=event.new_assignee.id)
        return cls.model_validate(data)


class TransitionsResponse(BaseModel):
    transitions: dict[str, dict[str, int]]
    total: int


class StatsResponse(BaseModel):
    total: int
    by_status: dict[str, int]
    by_priority: dict[str, int]
    unassigned: int
    new_tickets: int


class PerformanceResponse(BaseModel):
    technician_id: str
    name: str
    total: int
    resolved: int
    in_progress: int
    open: int
    resolution_rate: float
    avg_resolution_days: float


class NewTicketsResetResponse(BaseModel):
    cleared: int


class PollerStatusResponse(BaseModel):
    state: str
    live: bool
    interval_seconds: float
    last_success_at: datetime | None
    last_failure_at: datetime | None
    last_error: str | None
    cooldown_until: datetime | None
    consecutive_failures: int
    ticket_count: int
    rejected_ticket_ids: list[str]


class IntervalRequest(BaseModel):
    seconds: float = Field(gt=0, le=3600)


class LiveRequest(BaseModel):
    live: bool
