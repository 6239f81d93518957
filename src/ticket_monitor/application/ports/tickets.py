from __future__ import annotations

from typing import Protocol

from ticket_monitor.application.dto.tickets import TicketBatch


class TicketSource(Protocol):
    """Fetch-all-tickets contract of the helpdesk backend.

    Implementations raise ``RateLimitedError`` when throttled and
    ``TransportError`` for any other failure to obtain a batch.
    """

    async def fetch_all_tickets(self) -> TicketBatch: ...
