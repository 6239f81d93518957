from __future__ import annotations

from fastapi import APIRouter, Query

from ticket_monitor.api.deps import CurrentAdmin, CurrentViewer, MonitorDep
from ticket_monitor.api.v1.schemas.notification import (
    MarkAllReadResponse,
    NotificationResponse,
    UnreadCountResponse,
)

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    viewer: CurrentViewer,
    monitor: MonitorDep,
    unread_only: bool = Query(False),
) -> list[NotificationResponse]:
    items = monitor.notifications_for(viewer, unread_only=unread_only)
    return [NotificationResponse.from_entity(n) for n in items]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(viewer: CurrentViewer, monitor: MonitorDep) -> UnreadCountResponse:
    return UnreadCountResponse(unread=monitor.unread_count_for(viewer))


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(viewer: CurrentViewer, monitor: MonitorDep) -> MarkAllReadResponse:
    return MarkAllReadResponse(marked=monitor.mark_all_read_for(viewer))


@router.post("/{notification_id}/read", status_code=204)
async def mark_read(notification_id: str, viewer: CurrentViewer, monitor: MonitorDep) -> None:
    monitor.mark_read_for(viewer, notification_id)


@router.delete("", status_code=204)
async def clear_notifications(_admin: CurrentAdmin, monitor: MonitorDep) -> None:
    monitor.notifications.clear()
