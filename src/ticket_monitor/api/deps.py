"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ticket_monitor.application.dto.viewer import Viewer
from ticket_monitor.application.ports.auth import TokenVerifier
from ticket_monitor.config import settings
from ticket_monitor.infrastructure.auth.hs256_verifier import HS256Verifier
from ticket_monitor.services.monitor import TicketMonitor
from ticket_monitor.services.poller import PollingController

_bearer_scheme = HTTPBearer()


def get_monitor(request: Request) -> TicketMonitor:
    return request.app.state.monitor


def get_poller(request: Request) -> PollingController:
    return request.app.state.poller


MonitorDep = Annotated[TicketMonitor, Depends(get_monitor)]
PollerDep = Annotated[PollingController, Depends(get_poller)]


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)
    return _verifier


async def get_current_viewer(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(_bearer_scheme)],
) -> Viewer:
    verifier = get_verifier()
    try:
        return await verifier.verify(credentials.credentials)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc


CurrentViewer = Annotated[Viewer, Depends(get_current_viewer)]


async def get_current_admin(viewer: CurrentViewer) -> Viewer:
    if not viewer.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return viewer


CurrentAdmin = Annotated[Viewer, Depends(get_current_admin)]
