from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from ticket_monitor.application.exceptions import RateLimitedError, TransportError
from ticket_monitor.infrastructure.http.ticket_client import HttpTicketSource

TICKET = {
    "id": "T1",
    "title": "Impressora",
    "status": "aberto",
    "priority": "media",
    "category": "suporte",
    "created_by": "u1",
    "created_at": "2026-03-02T12:00:00Z",
    "updated_at": "2026-03-02T12:00:00Z",
}


def _source(handler: Callable[[httpx.Request], httpx.Response]) -> HttpTicketSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTicketSource("http://helpdesk.test/api/", token="secret", client=client)


@pytest.mark.asyncio
async def test_fetch_sends_token_and_parses_list():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[TICKET])

    batch = await _source(handler).fetch_all_tickets()

    assert [t.id for t in batch.tickets] == ["T1"]
    assert str(seen[0].url) == "http://helpdesk.test/api/tickets"
    assert seen[0].headers["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_fetch_accepts_wrapped_payload():
    source = _source(lambda r: httpx.Response(200, json={"tickets": [TICKET]}))
    batch = await source.fetch_all_tickets()
    assert len(batch.tickets) == 1


@pytest.mark.asyncio
async def test_429_is_rate_limited_with_retry_after():
    source = _source(
        lambda r: httpx.Response(429, json={"error": "Too many"}, headers={"Retry-After": "180"})
    )

    with pytest.raises(RateLimitedError) as exc_info:
        await source.fetch_all_tickets()

    assert exc_info.value.retry_after == 180.0
    assert exc_info.value.detail == "Too many"


@pytest.mark.asyncio
async def test_server_error_is_transport_error():
    source = _source(lambda r: httpx.Response(503, text="down"))

    with pytest.raises(TransportError) as exc_info:
        await source.fetch_all_tickets()

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_connection_failure_is_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(TransportError):
        await _source(handler).fetch_all_tickets()


@pytest.mark.asyncio
async def test_unexpected_shape_is_transport_error():
    source = _source(lambda r: httpx.Response(200, json={"count": 3}))
    with pytest.raises(TransportError):
        await source.fetch_all_tickets()
