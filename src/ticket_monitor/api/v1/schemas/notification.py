from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from ticket_monitor.domain.entities.notification import Notification


class NotificationResponse(BaseModel):
    id: str
    type: str
    title: str
    message: str
    user_id: str | None = None
    user_name: str | None = None
    ticket_id: str | None = None
    ticket_title: str | None = None
    created_at: datetime
    read: bool

    @classmethod
    def from_entity(cls, n: Notification) -> NotificationResponse:
        return cls(
            id=n.id,
            type=n.type,
            title=n.title,
            message=n.message,
            user_id=n.user_id,
            user_name=n.user_name,
            ticket_id=n.ticket_id,
            ticket_title=n.ticket_title,
            created_at=n.created_at,
            read=n.read,
        )


class UnreadCountResponse(BaseModel):
    unread: int


class MarkAllReadResponse(BaseModel):
    marked: int


class LogoutRequest(BaseModel):
    user_name: str | None = None
