"""Entrypoint: python -m ticket_monitor"""
from __future__ import annotations

import uvicorn

from ticket_monitor.config import settings


def main() -> None:
    uvicorn.run(
        "ticket_monitor.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
