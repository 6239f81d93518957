"""Polling controller: Idle -> Fetching -> Idle, or -> Cooldown when throttled."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from ticket_monitor.application.exceptions import FetchError, RateLimitedError
from ticket_monitor.application.ports.clock import Clock, SystemClock
from ticket_monitor.application.ports.tickets import TicketSource
from ticket_monitor.domain.value_objects.enums import PollerState
from ticket_monitor.services.monitor import TicketMonitor

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 3.0
DEFAULT_COOLDOWN_SECONDS = 120.0


@dataclass(frozen=True, slots=True)
class PollerStatus:
    state: PollerState
    live: bool
    interval_seconds: float
    last_success_at: datetime | None
    last_failure_at: datetime | None
    last_error: str | None
    cooldown_until: datetime | None
    consecutive_failures: int


class PollingController:
    """Drives ``TicketMonitor`` from a ``TicketSource`` on a timer.

    Only one fetch is ever in flight: a tick that finds the controller in
    FETCHING does nothing. While in COOLDOWN no fetch is attempted until the
    window has elapsed. Failures never touch the committed snapshot.
    """

    def __init__(
        self,
        source: TicketSource,
        monitor: TicketMonitor,
        *,
        clock: Clock | None = None,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        cooldown: float = DEFAULT_COOLDOWN_SECONDS,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._source = source
        self._monitor = monitor
        self._clock = clock or SystemClock()
        self._interval = interval
        self._cooldown = cooldown

        self._state = PollerState.IDLE
        self._live = True
        self._live_event = asyncio.Event()
        self._live_event.set()
        self._wake = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self._generation = 0

        self._cooldown_until: datetime | None = None
        self._last_success_at: datetime | None = None
        self._last_failure_at: datetime | None = None
        self._last_error: str | None = None
        self._consecutive_failures = 0

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def live(self) -> bool:
        return self._live

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def status(self) -> PollerStatus:
        return PollerStatus(
            state=self._state,
            live=self._live,
            interval_seconds=self._interval,
            last_success_at=self._last_success_at,
            last_failure_at=self._last_failure_at,
            last_error=self._last_error,
            cooldown_until=self._cooldown_until,
            consecutive_failures=self._consecutive_failures,
        )

    # -- controls -------------------------------------------------------

    def set_poll_interval(self, seconds: float) -> None:
        if seconds <= 0:
            raise ValueError("interval must be positive")
        self._interval = seconds
        logger.info("Poll interval set to %.1fs", seconds)
        self._wake.set()

    def set_live(self, live: bool) -> None:
        if live == self._live:
            return
        self._live = live
        if live:
            self._live_event.set()
        else:
            self._live_event.clear()
        logger.info("Ticket polling %s", "resumed" if live else "paused")
        self._wake.set()

    async def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(self._generation), name="ticket-poller")
        logger.info(
            "Ticket poller started (interval=%.1fs, cooldown=%.0fs)",
            self._interval,
            self._cooldown,
        )

    async def stop(self) -> None:
        # Bumping the generation makes any late fetch result stale.
        self._generation += 1
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("Ticket poller stopped")
        if self._state == PollerState.FETCHING:
            self._state = PollerState.IDLE

    # -- state machine --------------------------------------------------

    async def poll_once(self) -> bool:
        """Handle one timer tick. Returns True when a batch was applied."""
        if not self._live or self._state == PollerState.FETCHING:
            return False

        if self._state == PollerState.COOLDOWN:
            if self._cooldown_until is not None and self._clock.now() < self._cooldown_until:
                return False
            logger.info("Rate-limit cooldown over, resuming polling")
            self._state = PollerState.IDLE
            self._cooldown_until = None

        generation = self._generation
        self._state = PollerState.FETCHING
        try:
            batch = await self._source.fetch_all_tickets()
        except RateLimitedError as exc:
            if generation == self._generation:
                self._enter_cooldown(exc)
            return False
        except FetchError as exc:
            if generation == self._generation:
                self._record_failure(exc)
                self._state = PollerState.IDLE
                logger.warning("Ticket fetch failed, keeping stale data: %s", exc.detail)
            return False
        except BaseException:
            if generation == self._generation:
                self._state = PollerState.IDLE
            raise

        if generation != self._generation:
            logger.info("Discarding ticket batch that arrived after the poller stopped")
            return False

        self._state = PollerState.IDLE
        self._monitor.apply_batch(batch)
        self._last_success_at = self._clock.now()
        self._consecutive_failures = 0
        self._last_error = None
        return True

    def _enter_cooldown(self, exc: RateLimitedError) -> None:
        failed_at = self._record_failure(exc)
        window = self._cooldown
        if exc.retry_after is not None and exc.retry_after > window:
            window = exc.retry_after
        self._cooldown_until = failed_at + timedelta(seconds=window)
        self._state = PollerState.COOLDOWN
        logger.warning("Rate limited by ticket backend, cooling down for %.0fs", window)

    def _record_failure(self, exc: FetchError) -> datetime:
        failed_at = self._clock.now()
        self._last_failure_at = failed_at
        self._last_error = exc.detail or type(exc).__name__
        self._consecutive_failures += 1
        return failed_at

    def _next_delay(self) -> float:
        if self._state == PollerState.COOLDOWN and self._cooldown_until is not None:
            remaining = (self._cooldown_until - self._clock.now()).total_seconds()
            return max(remaining, 0.0)
        return self._interval

    async def _run(self, generation: int) -> None:
        while generation == self._generation:
            if not self._live:
                await self._live_event.wait()
                continue
            try:
                await self.poll_once()
            except Exception:
                logger.exception("Ticket poller loop error")
            await self._wait(self._next_delay())

    async def _wait(self, delay: float) -> None:
        """Sleep ``delay`` on the clock, cut short by interval or live changes."""
        self._wake.clear()
        sleeper = asyncio.ensure_future(self._clock.sleep(delay))
        waker = asyncio.ensure_future(self._wake.wait())
        try:
            await asyncio.wait({sleeper, waker}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for fut in (sleeper, waker):
                if not fut.done():
                    fut.cancel()
