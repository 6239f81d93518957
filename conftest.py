"""Root conftest: test environment must be in place before ``ticket_monitor.config`` is imported."""
from __future__ import annotations

import os
from pathlib import Path

ENV_FILE = Path(__file__).resolve().parent / ".env.test"


def _load_env(path: Path) -> None:
    if not path.exists():
        return
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


_load_env(ENV_FILE)
# Never talk to a real helpdesk backend from the test suite.
os.environ.setdefault("POLLER_AUTOSTART", "false")
