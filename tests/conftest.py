"""Shared test fixtures."""
from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from ticket_monitor.application.dto.tickets import TicketBatch
from ticket_monitor.application.dto.viewer import Viewer
from ticket_monitor.domain.entities.ticket import Comment, Interaction, TicketSnapshot, UserRef
from ticket_monitor.domain.events.activity import ActivityEvent
from ticket_monitor.domain.value_objects.enums import (
    InteractionType,
    TicketCategory,
    TicketPriority,
    TicketStatus,
    UserRole,
)
from ticket_monitor.domain.value_objects.ids import InteractionId, TicketId, UserId

T0 = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def make_user(user_id: str, role: UserRole = UserRole.USER, name: str | None = None) -> UserRef:
    return UserRef(id=UserId(user_id), name=name or user_id.title(), role=role)


def make_interaction(
    interaction_id: str,
    *,
    type: InteractionType = InteractionType.USER,
    content: str = "any update?",
    author: UserRef | None = None,
    created_at: datetime | None = None,
) -> Interaction:
    return Interaction(
        id=InteractionId(interaction_id),
        type=type,
        content=content,
        author=author,
        created_at=created_at or T0,
    )


def make_comment(
    comment_id: str,
    *,
    author: UserRef | None = None,
    content: str = "Alguma novidade?",
    created_at: datetime | None = None,
) -> Comment:
    return Comment(
        id=comment_id,
        content=content,
        author=author or make_user("creator"),
        created_at=created_at or T0,
    )


def make_ticket(
    ticket_id: str = "T1",
    *,
    status: TicketStatus = TicketStatus.OPEN,
    assigned_to: UserRef | None = None,
    created_by: UserRef | None = None,
    client: UserRef | None = None,
    queue: str | None = None,
    interactions: tuple[Interaction, ...] = (),
    title: str | None = None,
    comments: tuple[Comment, ...] = (),
    priority: TicketPriority = TicketPriority.MEDIUM,
    updated_at: datetime | None = None,
) -> TicketSnapshot:
    return TicketSnapshot(
        id=TicketId(ticket_id),
        title=title or f"Ticket {ticket_id}",
        status=status,
        priority=priority,
        category=TicketCategory.SUPPORT,
        created_by=created_by or make_user("creator"),
        assigned_to=assigned_to,
        client=client,
        queue=queue,
        interactions=interactions,
        comments=comments,
        created_at=T0,
        updated_at=updated_at or T0,
    )


def as_map(*tickets: TicketSnapshot) -> dict[TicketId, TicketSnapshot]:
    return {t.id: t for t in tickets}


def make_batch(*tickets: TicketSnapshot) -> TicketBatch:
    return TicketBatch(tickets=tuple(tickets))


@pytest.fixture
def admin_viewer() -> Viewer:
    return Viewer(id=UserId("admin-1"), role=UserRole.ADMIN, name="Admin")


@pytest.fixture
def user_viewer() -> Viewer:
    return Viewer(id=UserId("creator"), role=UserRole.USER, name="Creator")


@pytest.fixture
def tech_viewer() -> Viewer:
    return Viewer(id=UserId("tech-7"), role=UserRole.TECHNICIAN, name="Tech 7")


class ManualClock:
    """Clock that only moves when told to; ``sleep`` advances it instantly."""

    def __init__(self, start: datetime = T0) -> None:
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)

    async def sleep(self, seconds: float) -> None:
        self.advance(seconds)
        await asyncio.sleep(0)


class HoldingClock(ManualClock):
    """Records every sleep request and never finishes one on its own."""

    def __init__(self, start: datetime = T0) -> None:
        super().__init__(start)
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        await asyncio.Event().wait()


async def spin_until(predicate, attempts: int = 200) -> bool:
    for _ in range(attempts):
        if predicate():
            return True
        await asyncio.sleep(0)
    return predicate()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@dataclass
class FakeTicketSource:
    """Scripted fetch contract: each call pops the next batch or exception."""

    clock: ManualClock | None = None
    responses: deque[Any] = field(default_factory=deque)
    calls: int = 0
    call_times: list[datetime] = field(default_factory=list)
    gate: asyncio.Event | None = None
    _last: TicketBatch = field(default_factory=lambda: TicketBatch(tickets=()))

    def queue(self, *items: Any) -> FakeTicketSource:
        self.responses.extend(items)
        return self

    async def fetch_all_tickets(self) -> TicketBatch:
        self.calls += 1
        if self.clock is not None:
            self.call_times.append(self.clock.now())
        if self.gate is not None:
            await self.gate.wait()
        item = self.responses.popleft() if self.responses else self._last
        if isinstance(item, BaseException):
            raise item
        self._last = item
        return item


@dataclass
class RecordingAlert:
    events: list[ActivityEvent] = field(default_factory=list)

    def notify_attention_required(self, event: ActivityEvent) -> None:
        self.events.append(event)
