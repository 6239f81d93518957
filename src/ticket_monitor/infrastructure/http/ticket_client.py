"""httpx-backed implementation of the fetch-all-tickets contract."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ticket_monitor.application.dto.tickets import TicketBatch
from ticket_monitor.application.exceptions import RateLimitedError, TransportError
from ticket_monitor.infrastructure.http.mappers import parse_tickets

logger = logging.getLogger(__name__)


def _retry_after(response: httpx.Response) -> float | None:
    raw = response.headers.get("Retry-After")
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(data, Mapping):
        for key in ("error", "detail", "message"):
            value = data.get(key)
            if isinstance(value, str):
                return value
    return f"HTTP {response.status_code}"


class HttpTicketSource:
    """Implements application.ports.tickets.TicketSource over the helpdesk REST API."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_all_tickets(self) -> TicketBatch:
        records = await self._get_json("/tickets")
        if isinstance(records, Mapping):
            records = records.get("tickets", records.get("data"))
        if not isinstance(records, list):
            raise TransportError("Unexpected /tickets payload: expected a list")
        batch = parse_tickets(records)
        logger.debug(
            "Fetched %d tickets (%d rejected)", len(batch.tickets), len(batch.rejected)
        )
        return batch

    async def _get_json(self, path: str) -> Any:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            response = await self._client.get(f"{self._base_url}{path}", headers=headers)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Timed out calling {path}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {path} failed: {exc}") from exc

        if response.status_code == 429:
            raise RateLimitedError(
                _error_message(response), retry_after=_retry_after(response)
            )
        if response.status_code >= 400:
            raise TransportError(_error_message(response), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"Invalid JSON from {path}") from exc
