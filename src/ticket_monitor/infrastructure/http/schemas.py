"""Wire models for the helpdesk backend's ``GET /tickets`` payload."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

from ticket_monitor.domain.value_objects.enums import (
    InteractionType,
    TicketCategory,
    TicketPriority,
    TicketStatus,
)


def _to_str(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# Backend ids come back as ints or strings depending on the table.
IdStr = Annotated[str, BeforeValidator(_to_str)]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class UserPayload(_Payload):
    id: IdStr | None = None
    name: str | None = None
    email: str | None = None
    role: str | None = None


class QueuePayload(_Payload):
    id: IdStr | None = None
    name: str | None = None


class InteractionPayload(_Payload):
    id: IdStr
    type: InteractionType
    content: str = ""
    author: UserPayload | None = None
    created_at: datetime = Field(validation_alias=AliasChoices("created_at", "createdAt"))
    metadata: dict[str, Any] | None = None
    files: list[Any] | None = None


class CommentPayload(_Payload):
    id: IdStr
    content: str = ""
    author: UserPayload | None = None
    created_at: datetime = Field(validation_alias=AliasChoices("created_at", "createdAt"))


class TicketPayload(_Payload):
    id: IdStr
    title: str = ""
    status: TicketStatus
    priority: TicketPriority
    category: TicketCategory
    created_by_user: UserPayload | None = Field(
        default=None, validation_alias=AliasChoices("created_by_user", "createdBy")
    )
    created_by: IdStr | None = None
    assigned_to_user: UserPayload | None = Field(
        default=None, validation_alias=AliasChoices("assigned_to_user", "assignedTo")
    )
    client_user: UserPayload | None = Field(
        default=None, validation_alias=AliasChoices("client_user", "client")
    )
    queue: QueuePayload | str | None = None
    queue_name: str | None = None
    interactions: list[InteractionPayload] | None = None
    comments: list[CommentPayload] | None = None
    files: list[Any] | None = None
    created_at: datetime = Field(validation_alias=AliasChoices("created_at", "createdAt"))
    updated_at: datetime = Field(validation_alias=AliasChoices("updated_at", "updatedAt"))