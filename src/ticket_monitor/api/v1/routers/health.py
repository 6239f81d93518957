from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ticket_monitor.api.deps import PollerDep
from ticket_monitor.config import settings
from ticket_monitor.domain.value_objects.enums import PollerState

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(poller: PollerDep) -> JSONResponse:
    status = poller.status()
    errors: list[str] = []

    if status.last_success_at is None:
        errors.append("tickets: no successful poll yet")
    else:
        age = (poller.clock.now() - status.last_success_at).total_seconds()
        if age > settings.STALE_AFTER_SECONDS:
            errors.append(f"tickets: data is {age:.0f}s old")
    if status.state == PollerState.COOLDOWN:
        errors.append("tickets: rate limited, cooling down")

    if errors:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "errors": errors},
        )
    return JSONResponse(content={"status": "ready"})
