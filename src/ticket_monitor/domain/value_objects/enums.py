from __future__ import annotations

from enum import StrEnum


class TicketStatus(StrEnum):
    OPEN = "aberto"
    IN_PROGRESS = "em_andamento"
    IN_SERVICE = "em_atendimento"
    PENDING = "pendente"
    RESOLVED = "resolvido"
    CLOSED = "fechado"
    FINISHED = "encerrado"
    TESTING = "em_fase_de_testes"
    HOMOLOGATION = "homologacao"
    AWAITING_CLIENT = "aguardando_cliente"


class TicketPriority(StrEnum):
    LOW = "baixa"
    MEDIUM = "media"
    HIGH = "alta"
    CRITICAL = "critica"


class TicketCategory(StrEnum):
    SUPPORT = "suporte"
    TECHNICAL = "tecnico"
    INTEGRATION = "integracao"
    IMPROVEMENT = "melhoria"


class InteractionType(StrEnum):
    USER = "user"
    SYSTEM = "system"
    STATUS_CHANGE = "status_change"
    ASSIGNMENT = "assignment"
    INTERNAL_NOTE = "internal_note"
    QUEUE_TRANSFER = "queue_transfer"


class UserRole(StrEnum):
    ADMIN = "admin"
    TECHNICIAN = "technician"
    TECHNICIAN_N2 = "technician_n2"
    USER = "user"
    FINANCIAL = "financial"


class ActivityKind(StrEnum):
    CREATED = "created"
    STATUS_CHANGED = "status_changed"
    ASSIGNED = "assigned"
    QUEUE_TRANSFER = "queue_transfer"
    INTERACTION_ADDED = "interaction_added"
    COMMENT_ADDED = "comment_added"
    ACCEPTED = "accepted"


class NotificationType(StrEnum):
    LOGIN = "login"
    LOGOUT = "logout"
    TICKET_CREATED = "ticket_created"
    TICKET_UPDATED = "ticket_updated"
    TICKET_CLOSED = "ticket_closed"
    TICKET_ASSIGNED = "ticket_assigned"
    COMMENT_ADDED = "comment_added"
    QUEUE_TRANSFER = "queue_transfer"
    TICKET_ACCEPTED = "ticket_accepted"


class PollerState(StrEnum):
    IDLE = "idle"
    FETCHING = "fetching"
    COOLDOWN = "cooldown"


# Statuses that count as "closed" when announcing a status change.
CLOSED_STATUSES = frozenset({TicketStatus.CLOSED, TicketStatus.FINISHED})

# Statuses from which moving to IN_SERVICE with a new assignee means "accepted".
ACCEPTABLE_STATUSES = frozenset({TicketStatus.OPEN, TicketStatus.PENDING})

# Interaction types already reported through a dedicated event kind.
STRUCTURAL_INTERACTION_TYPES = frozenset(
    {
        InteractionType.QUEUE_TRANSFER,
        InteractionType.STATUS_CHANGE,
        InteractionType.ASSIGNMENT,
    }
)

UNASSIGNED_QUEUE = "Sem atribuição"
