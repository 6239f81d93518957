"""Activity events produced by diffing two ticket snapshots."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Union

from ticket_monitor.domain.entities.ticket import Comment, Interaction, TicketSnapshot, UserRef
from ticket_monitor.domain.value_objects.enums import ActivityKind, TicketStatus


@dataclass(frozen=True, slots=True)
class TicketCreated:
    kind: ClassVar[ActivityKind] = ActivityKind.CREATED

    ticket: TicketSnapshot
    occurred_at: datetime


@dataclass(frozen=True, slots=True)
class StatusChanged:
    kind: ClassVar[ActivityKind] = ActivityKind.STATUS_CHANGED

    ticket: TicketSnapshot
    occurred_at: datetime
    old: TicketStatus
    new: TicketStatus


@dataclass(frozen=True, slots=True)
class TicketAssigned:
    kind: ClassVar[ActivityKind] = ActivityKind.ASSIGNED

    ticket: TicketSnapshot
    occurred_at: datetime
    old: UserRef | None
    new: UserRef | None


@dataclass(frozen=True, slots=True)
class QueueTransferred:
    kind: ClassVar[ActivityKind] = ActivityKind.QUEUE_TRANSFER

    ticket: TicketSnapshot
    occurred_at: datetime
    old: str
    new: str


@dataclass(frozen=True, slots=True)
class InteractionAdded:
    kind: ClassVar[ActivityKind] = ActivityKind.INTERACTION_ADDED

    ticket: TicketSnapshot
    occurred_at: datetime
    interaction: Interaction


@dataclass(frozen=True, slots=True)
class CommentAdded:
    """A legacy ``comments`` entry appeared on the ticket."""

    kind: ClassVar[ActivityKind] = ActivityKind.COMMENT_ADDED

    ticket: TicketSnapshot
    occurred_at: datetime
    comment: Comment


@dataclass(frozen=True, slots=True)
class TicketAccepted:
    kind: ClassVar[ActivityKind] = ActivityKind.ACCEPTED

    ticket: TicketSnapshot
    occurred_at: datetime
    new_assignee: UserRef


ActivityEvent = Union[
    TicketCreated,
    StatusChanged,
    TicketAssigned,
    QueueTransferred,
    InteractionAdded,
    CommentAdded,
    TicketAccepted,
]
