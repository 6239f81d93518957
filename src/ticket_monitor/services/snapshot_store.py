from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from types import MappingProxyType

from ticket_monitor.domain.entities.ticket import TicketSnapshot
from ticket_monitor.domain.value_objects.ids import TicketId


class SnapshotStore:
    """Last committed ticket collection, keyed by ticket id.

    The collection is replaced wholesale; readers always get the mapping from
    the latest ``replace`` call and never a half-written one.
    """

    def __init__(self) -> None:
        self._tickets: Mapping[TicketId, TicketSnapshot] = MappingProxyType({})
        self._committed_at: datetime | None = None

    @property
    def tickets(self) -> Mapping[TicketId, TicketSnapshot]:
        return self._tickets

    @property
    def committed_at(self) -> datetime | None:
        return self._committed_at

    @property
    def is_empty(self) -> bool:
        return not self._tickets

    def get(self, ticket_id: TicketId) -> TicketSnapshot | None:
        return self._tickets.get(ticket_id)

    def replace(self, tickets: Iterable[TicketSnapshot], committed_at: datetime) -> None:
        self._tickets = MappingProxyType({t.id: t for t in tickets})
        self._committed_at = committed_at

    def __len__(self) -> int:
        return len(self._tickets)
