from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ticket_monitor.domain.value_objects.enums import (
    InteractionType,
    TicketCategory,
    TicketPriority,
    TicketStatus,
    UserRole,
)
from ticket_monitor.domain.value_objects.ids import InteractionId, TicketId, UserId


@dataclass(frozen=True, slots=True)
class UserRef:
    """Reference to a helpdesk user as embedded in a ticket payload."""

    id: UserId
    name: str = ""
    email: str | None = None
    role: UserRole | None = None


@dataclass(frozen=True, slots=True)
class Interaction:
    id: InteractionId
    type: InteractionType
    content: str
    created_at: datetime
    author: UserRef | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    files_count: int = 0


@dataclass(frozen=True, slots=True)
class Comment:
    """Legacy comment, superseded by interactions but still served by the API."""

    id: str
    content: str
    author: UserRef
    created_at: datetime


@dataclass(frozen=True, slots=True)
class TicketSnapshot:
    """Value copy of one ticket at the moment it was fetched."""

    id: TicketId
    title: str
    status: TicketStatus
    priority: TicketPriority
    category: TicketCategory
    created_by: UserRef
    created_at: datetime
    updated_at: datetime
    assigned_to: UserRef | None = None
    client: UserRef | None = None
    queue: str | None = None
    interactions: tuple[Interaction, ...] = ()
    comments: tuple[Comment, ...] = ()
    files_count: int = 0

    @property
    def assignee_id(self) -> UserId | None:
        return self.assigned_to.id if self.assigned_to else None

    @property
    def client_id(self) -> UserId | None:
        return self.client.id if self.client else None
