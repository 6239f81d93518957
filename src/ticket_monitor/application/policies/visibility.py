"""Who gets to see which ticket activity.

Each role maps to one pure rule. Rules are evaluated per (viewer, event) at
query time, never stored on the notification, so the same event can be
visible to several viewers for different reasons.
"""
from __future__ import annotations

from typing import Callable

from ticket_monitor.application.dto.viewer import Viewer
from ticket_monitor.domain.entities.notification import Notification
from ticket_monitor.domain.entities.ticket import TicketSnapshot
from ticket_monitor.domain.events.activity import ActivityEvent, TicketAssigned
from ticket_monitor.domain.value_objects.enums import NotificationType, UserRole

VisibilityRule = Callable[[Viewer, ActivityEvent, TicketSnapshot], bool]


def _admin_rule(viewer: Viewer, event: ActivityEvent, ticket: TicketSnapshot) -> bool:
    return True


def _user_rule(viewer: Viewer, event: ActivityEvent, ticket: TicketSnapshot) -> bool:
    return ticket.created_by.id == viewer.id or ticket.client_id == viewer.id


def _technician_rule(viewer: Viewer, event: ActivityEvent, ticket: TicketSnapshot) -> bool:
    related = (
        ticket.assignee_id == viewer.id
        or ticket.assigned_to is None
        or ticket.created_by.id == viewer.id
    )
    if not related:
        return False
    if isinstance(event, TicketAssigned):
        # Technicians only hear about assignments that land on them.
        return event.new is not None and event.new.id == viewer.id
    return True


def _financial_rule(viewer: Viewer, event: ActivityEvent, ticket: TicketSnapshot) -> bool:
    return False


_RULES: dict[UserRole, VisibilityRule] = {
    UserRole.ADMIN: _admin_rule,
    UserRole.USER: _user_rule,
    UserRole.TECHNICIAN: _technician_rule,
    UserRole.TECHNICIAN_N2: _technician_rule,
    UserRole.FINANCIAL: _financial_rule,
}

_SESSION_TYPES = frozenset({NotificationType.LOGIN, NotificationType.LOGOUT})


def is_visible(viewer: Viewer, event: ActivityEvent, ticket: TicketSnapshot) -> bool:
    return _RULES[viewer.role](viewer, event, ticket)


def is_notification_visible(
    viewer: Viewer,
    notification: Notification,
    ticket: TicketSnapshot | None = None,
) -> bool:
    """Apply ``is_visible`` to a stored notification.

    ``ticket`` is the ticket as it stands now; without it the copy captured
    by the event is used. Login/logout notifications carry no event: admins
    see all of them, everybody else only their own.
    """
    if notification.event is not None:
        return is_visible(viewer, notification.event, ticket or notification.event.ticket)
    if notification.type in _SESSION_TYPES:
        return viewer.is_admin or notification.user_id == viewer.id
    return viewer.is_admin
