from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ticket_monitor.domain.events.activity import ActivityEvent
from ticket_monitor.domain.value_objects.enums import NotificationType
from ticket_monitor.domain.value_objects.ids import NotificationId, TicketId, UserId


@dataclass(frozen=True, slots=True)
class Notification:
    id: NotificationId
    type: NotificationType
    title: str
    message: str
    created_at: datetime
    user_id: UserId | None = None
    user_name: str | None = None
    ticket_id: TicketId | None = None
    ticket_title: str | None = None
    read: bool = False
    # None for login/logout, which do not come from the ticket diff.
    event: ActivityEvent | None = None
