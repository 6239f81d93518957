from __future__ import annotations

from typing import Protocol

from ticket_monitor.application.dto.viewer import Viewer


class TokenVerifier(Protocol):
    """Turns a bearer token into the Viewer whose notifications we filter for."""

    async def verify(self, token: str) -> Viewer: ...
