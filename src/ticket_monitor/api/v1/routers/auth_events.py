"""Login/logout notifications reported by the helpdesk front end."""
from __future__ import annotations

from fastapi import APIRouter

from ticket_monitor.api.deps import CurrentViewer, MonitorDep
from ticket_monitor.api.v1.schemas.notification import LogoutRequest, NotificationResponse
from ticket_monitor.domain.entities.ticket import UserRef

router = APIRouter(prefix="/api/v1/auth-events", tags=["auth-events"])


@router.post("/login", response_model=NotificationResponse, status_code=201)
async def login(viewer: CurrentViewer, monitor: MonitorDep) -> NotificationResponse:
    user = UserRef(id=viewer.id, name=viewer.name, role=viewer.role)
    return NotificationResponse.from_entity(monitor.record_login(user))


@router.post("/logout", response_model=NotificationResponse, status_code=201)
async def logout(
    viewer: CurrentViewer, monitor: MonitorDep, body: LogoutRequest | None = None,
) -> NotificationResponse:
    name = (body.user_name if body else None) or viewer.name or None
    return NotificationResponse.from_entity(monitor.record_logout(viewer.id, name))
