"""Turn activity events into user-facing notifications."""
from __future__ import annotations

import uuid
from datetime import datetime

from ticket_monitor.domain.entities.notification import Notification
from ticket_monitor.domain.entities.ticket import UserRef
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
    CLOSED_STATUSES,
    InteractionType,
    NotificationType,
    TicketStatus,
)
from ticket_monitor.domain.value_objects.ids import NotificationId, UserId

_STATUS_LABELS: dict[str, str] = {
    TicketStatus.OPEN: "Aberto",
    TicketStatus.IN_PROGRESS: "Em Andamento",
    TicketStatus.IN_SERVICE: "Em atendimento",
    TicketStatus.PENDING: "Pendente",
    TicketStatus.RESOLVED: "Resolvido",
    TicketStatus.CLOSED: "Fechado",
    TicketStatus.FINISHED: "Encerrado",
    TicketStatus.TESTING: "Em fase de testes",
    TicketStatus.HOMOLOGATION: "Homologação",
    TicketStatus.AWAITING_CLIENT: "Aguardando Cliente",
}


def status_label(status: str) -> str:
    return _STATUS_LABELS.get(status, status)


def new_notification_id() -> NotificationId:
    return NotificationId(f"notif-{uuid.uuid4().hex}")


def from_event(event: ActivityEvent, created_at: datetime) -> Notification | None:
    """Build the notification announcing ``event``.

    Returns None for events nobody is notified about: un-assignments and
    internal notes.
    """
    ticket = event.ticket
    base = {
        "id": new_notification_id(),
        "created_at": created_at,
        "ticket_id": ticket.id,
        "ticket_title": ticket.title,
        "event": event,
    }

    if isinstance(event, TicketCreated):
        return Notification(
            type=NotificationType.TICKET_CREATED,
            title="Novo chamado criado",
            message=f'Chamado "{ticket.title}" foi criado',
            **base,
        )

    if isinstance(event, StatusChanged):
        if event.new in CLOSED_STATUSES:
            return Notification(
                type=NotificationType.TICKET_CLOSED,
                title="Chamado fechado",
                message=f'Chamado "{ticket.title}" foi fechado',
                **base,
            )
        return Notification(
            type=NotificationType.TICKET_UPDATED,
            title="Chamado atualizado",
            message=(
                f'Status do chamado "{ticket.title}" foi alterado para '
                f"{status_label(event.new)}"
            ),
            **base,
        )

    if isinstance(event, TicketAssigned):
        if event.new is None:
            return None
        return Notification(
            type=NotificationType.TICKET_ASSIGNED,
            title="Chamado atribuído",
            message=f'Chamado "{ticket.title}" foi atribuído a {_display(event.new)}',
            user_id=event.new.id,
            user_name=event.new.name or None,
            **base,
        )

    if isinstance(event, QueueTransferred):
        return Notification(
            type=NotificationType.QUEUE_TRANSFER,
            title="Chamado transferido de fila",
            message=f'Chamado "{ticket.title}" foi transferido de {event.old} para {event.new}',
            **base,
        )

    if isinstance(event, InteractionAdded):
        interaction = event.interaction
        if interaction.type == InteractionType.INTERNAL_NOTE:
            return None
        author = interaction.author
        return Notification(
            type=NotificationType.COMMENT_ADDED,
            title="Novo comentário",
            message=f'{_display(author) if author else "Sistema"} comentou no chamado "{ticket.title}"',
            user_id=author.id if author else None,
            user_name=(author.name or None) if author else None,
            **base,
        )

    if isinstance(event, CommentAdded):
        author = event.comment.author
        return Notification(
            type=NotificationType.COMMENT_ADDED,
            title="Novo comentário",
            message=f'{_display(author)} comentou no chamado "{ticket.title}"',
            user_id=author.id,
            user_name=author.name or None,
            **base,
        )

    if isinstance(event, TicketAccepted):
        return Notification(
            type=NotificationType.TICKET_ACCEPTED,
            title="Chamado aceito",
            message=f'Chamado "{ticket.title}" foi aceito por {_display(event.new_assignee)}',
            user_id=event.new_assignee.id,
            user_name=event.new_assignee.name or None,
            **base,
        )

    return None


def login(user: UserRef, created_at: datetime) -> Notification:
    return Notification(
        id=new_notification_id(),
        type=NotificationType.LOGIN,
        title="Usuário fez login",
        message=f"{_display(user)} entrou no sistema",
        created_at=created_at,
        user_id=user.id,
        user_name=user.name or None,
    )


def logout(user_id: UserId, created_at: datetime, user_name: str | None = None) -> Notification:
    return Notification(
        id=new_notification_id(),
        type=NotificationType.LOGOUT,
        title="Usuário fez logout",
        message=f"{user_name} saiu do sistema" if user_name else "Um usuário saiu do sistema",
        created_at=created_at,
        user_id=user_id,
        user_name=user_name,
    )


def _display(user: UserRef) -> str:
    return user.name or user.id
