"""Headless ticket poller: runs the change-detection loop and logs every event."""
from __future__ import annotations

import asyncio
import logging

from ticket_monitor.app import build_engine
from ticket_monitor.config import settings
from ticket_monitor.infrastructure.http.ticket_client import HttpTicketSource

logger = logging.getLogger(__name__)


async def run_ticket_poller() -> None:
    source = HttpTicketSource(
        settings.TICKETS_API_URL,
        token=settings.TICKETS_API_TOKEN,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    monitor, poller = build_engine(source)

    logger.info(
        "Ticket poller worker started (url=%s, poll=%.1fs, cooldown=%.0fs)",
        settings.TICKETS_API_URL,
        settings.POLL_INTERVAL_SECONDS,
        settings.RATE_LIMIT_COOLDOWN_SECONDS,
    )

    await poller.start()
    try:
        while True:
            await asyncio.sleep(3600)
    except asyncio.CancelledError:
        pass
    finally:
        await poller.stop()
        await source.aclose()
        logger.info(
            "Ticket poller worker stopped (%d tickets tracked, %d transitions)",
            len(monitor.snapshots),
            monitor.transitions.total,
        )


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(run_ticket_poller())


if __name__ == "__main__":
    main()
