from __future__ import annotations

from fastapi import APIRouter, Query

from ticket_monitor.api.deps import CurrentAdmin, MonitorDep, PollerDep
from ticket_monitor.api.v1.schemas.monitor import (
    ActivityResponse,
    IntervalRequest,
    LiveRequest,
    NewTicketsResetResponse,
    PerformanceResponse,
    PollerStatusResponse,
    StatsResponse,
    TransitionsResponse,
)
from ticket_monitor.services.monitor import TicketMonitor
from ticket_monitor.services.poller import PollingController

router = APIRouter(prefix="/api/v1/monitor", tags=["monitor"])


def _status(poller: PollingController, monitor: TicketMonitor) -> PollerStatusResponse:
    s = poller.status()
    return PollerStatusResponse(
        state=s.state,
        live=s.live,
        interval_seconds=s.interval_seconds,
        last_success_at=s.last_success_at,
        last_failure_at=s.last_failure_at,
        last_error=s.last_error,
        cooldown_until=s.cooldown_until,
        consecutive_failures=s.consecutive_failures,
        ticket_count=len(monitor.snapshots),
        rejected_ticket_ids=[r.ticket_id for r in monitor.last_rejected if r.ticket_id],
    )


@router.get("/activity", response_model=list[ActivityResponse])
async def recent_activity(
    admin: CurrentAdmin,
    monitor: MonitorDep,
    limit: int = Query(50, ge=1, le=100),
) -> list[ActivityResponse]:
    return [ActivityResponse.from_event(e) for e in monitor.activity_for(admin, limit)]


@router.get("/transitions", response_model=TransitionsResponse)
async def transitions(_admin: CurrentAdmin, monitor: MonitorDep) -> TransitionsResponse:
    return TransitionsResponse(
        transitions=monitor.get_transition_matrix(),
        total=monitor.transitions.total,
    )


@router.get("/stats", response_model=StatsResponse)
async def snapshot_stats(_admin: CurrentAdmin, monitor: MonitorDep) -> StatsResponse:
    s = monitor.stats()
    return StatsResponse(
        total=s.total,
        by_status=s.by_status,
        by_priority=s.by_priority,
        unassigned=s.unassigned,
        new_tickets=monitor.new_tickets,
    )


@router.get("/performance", response_model=list[PerformanceResponse])
async def technician_performance(
    _admin: CurrentAdmin, monitor: MonitorDep,
) -> list[PerformanceResponse]:
    return [
        PerformanceResponse(
            technician_id=p.technician_id,
            name=p.name,
            total=p.total,
            resolved=p.resolved,
            in_progress=p.in_progress,
            open=p.open,
            resolution_rate=p.resolution_rate,
            avg_resolution_days=p.avg_resolution_days,
        )
        for p in monitor.performance()
    ]


@router.post("/new-tickets/reset", response_model=NewTicketsResetResponse)
async def reset_new_tickets(_admin: CurrentAdmin, monitor: MonitorDep) -> NewTicketsResetResponse:
    return NewTicketsResetResponse(cleared=monitor.reset_new_tickets())


@router.get("/status", response_model=PollerStatusResponse)
async def poller_status(
    _admin: CurrentAdmin, monitor: MonitorDep, poller: PollerDep,
) -> PollerStatusResponse:
    return _status(poller, monitor)


@router.put("/interval", response_model=PollerStatusResponse)
async def set_interval(
    body: IntervalRequest, _admin: CurrentAdmin, monitor: MonitorDep, poller: PollerDep,
) -> PollerStatusResponse:
    poller.set_poll_interval(body.seconds)
    return _status(poller, monitor)


@router.put("/live", response_model=PollerStatusResponse)
async def set_live(
    body: LiveRequest, _admin: CurrentAdmin, monitor: MonitorDep, poller: PollerDep,
) -> PollerStatusResponse:
    poller.set_live(body.live)
    return _status(poller, monitor)
