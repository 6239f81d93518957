from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ticket_monitor.api.v1.routers import auth_events, health, monitor, notifications
from ticket_monitor.application.exceptions import NotFoundError
from ticket_monitor.config import settings
from ticket_monitor.infrastructure.alert.log_alert import LoggingAttentionNotifier
from ticket_monitor.infrastructure.http.ticket_client import HttpTicketSource
from ticket_monitor.services.monitor import TicketMonitor
from ticket_monitor.services.poller import PollingController

logger = logging.getLogger(__name__)


def build_engine(source: HttpTicketSource) -> tuple[TicketMonitor, PollingController]:
    monitor = TicketMonitor(
        alert=LoggingAttentionNotifier(),
        notification_capacity=settings.NOTIFICATION_CAPACITY,
        activity_limit=settings.ACTIVITY_HISTORY_LIMIT,
    )
    poller = PollingController(
        source,
        monitor,
        interval=settings.POLL_INTERVAL_SECONDS,
        cooldown=settings.RATE_LIMIT_COOLDOWN_SECONDS,
    )
    return monitor, poller


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    source = HttpTicketSource(
        settings.TICKETS_API_URL,
        token=settings.TICKETS_API_TOKEN,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    app.state.monitor, app.state.poller = build_engine(source)
    logger.info("Ticket source configured at %s", settings.TICKETS_API_URL)

    if settings.POLLER_AUTOSTART:
        await app.state.poller.start()

    yield

    await app.state.poller.stop()
    await source.aclose()
    logger.info("Ticket source closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Helpdesk Ticket Monitor",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(notifications.router)
    app.include_router(monitor.router)
    app.include_router(auth_events.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})
