from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from ticket_monitor.application.dto.tickets import TicketBatch
from ticket_monitor.application.exceptions import MalformedSnapshotError
from ticket_monitor.domain.entities.ticket import Comment, Interaction, TicketSnapshot, UserRef
from ticket_monitor.domain.value_objects.enums import UserRole
from ticket_monitor.domain.value_objects.ids import InteractionId, TicketId, UserId
from ticket_monitor.infrastructure.http.schemas import (
    CommentPayload,
    InteractionPayload,
    QueuePayload,
    TicketPayload,
    UserPayload,
)


def user_to_entity(payload: UserPayload | None) -> UserRef | None:
    # LEFT JOINs hand back {"id": null, ...} for missing users.
    if payload is None or not payload.id:
        return None
    role = payload.role if payload.role in UserRole.__members__.values() else None
    return UserRef(
        id=UserId(payload.id),
        name=payload.name or "",
        email=payload.email,
        role=UserRole(role) if role else None,
    )


def interaction_to_entity(payload: InteractionPayload) -> Interaction:
    return Interaction(
        id=InteractionId(payload.id),
        type=payload.type,
        content=payload.content,
        author=user_to_entity(payload.author),
        created_at=payload.created_at,
        metadata=dict(payload.metadata or {}),
        files_count=len(payload.files or ()),
    )


def comment_to_entity(payload: CommentPayload) -> Comment | None:
    author = user_to_entity(payload.author)
    if author is None:
        return None
    return Comment(
        id=payload.id,
        content=payload.content,
        author=author,
        created_at=payload.created_at,
    )


def _queue_label(payload: TicketPayload) -> str | None:
    if isinstance(payload.queue, QueuePayload):
        return payload.queue.name or payload.queue_name
    return payload.queue_name or payload.queue


def ticket_to_entity(payload: TicketPayload) -> TicketSnapshot:
    created_by = user_to_entity(payload.created_by_user)
    if created_by is None:
        if not payload.created_by:
            raise MalformedSnapshotError(payload.id, "missing created_by")
        created_by = UserRef(id=UserId(payload.created_by))

    comments = (comment_to_entity(c) for c in payload.comments or ())
    return TicketSnapshot(
        id=TicketId(payload.id),
        title=payload.title,
        status=payload.status,
        priority=payload.priority,
        category=payload.category,
        created_by=created_by,
        assigned_to=user_to_entity(payload.assigned_to_user),
        client=user_to_entity(payload.client_user),
        queue=_queue_label(payload),
        interactions=tuple(interaction_to_entity(i) for i in payload.interactions or ()),
        comments=tuple(c for c in comments if c is not None),
        created_at=payload.created_at,
        updated_at=payload.updated_at,
        files_count=len(payload.files or ()),
    )


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors()[:3]:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts) or "invalid ticket"


def parse_ticket(raw: Any) -> TicketSnapshot:
    if not isinstance(raw, dict):
        raise MalformedSnapshotError(None, "ticket record is not an object")
    raw_id = raw.get("id")
    try:
        payload = TicketPayload.model_validate(raw)
    except ValidationError as exc:
        raise MalformedSnapshotError(
            str(raw_id) if raw_id is not None else None, _describe(exc)
        ) from exc
    return ticket_to_entity(payload)


def parse_tickets(records: Iterable[Any]) -> TicketBatch:
    """Map raw records, setting aside the ones that fail validation."""
    tickets: list[TicketSnapshot] = []
    rejected: list[MalformedSnapshotError] = []
    for raw in records:
        try:
            tickets.append(parse_ticket(raw))
        except MalformedSnapshotError as exc:
            rejected.append(exc)
    return TicketBatch(tickets=tuple(tickets), rejected=tuple(rejected))
