"""Ticket change-detection engine: one cycle per fetched batch."""
from __future__ import annotations

import logging
from collections.abc import Iterable

from ticket_monitor.application.dto.tickets import TicketBatch
from ticket_monitor.application.dto.viewer import Viewer
from ticket_monitor.application.exceptions import MalformedSnapshotError, NotFoundError
from ticket_monitor.application.policies.visibility import is_notification_visible, is_visible
from ticket_monitor.application.ports.alert import AttentionNotifier
from ticket_monitor.application.ports.clock import Clock, SystemClock
from ticket_monitor.domain.entities.notification import Notification
from ticket_monitor.domain.entities.ticket import TicketSnapshot, UserRef
from ticket_monitor.domain.events.activity import ActivityEvent, StatusChanged, TicketCreated
from ticket_monitor.domain.value_objects.ids import TicketId, UserId
from ticket_monitor.services import notification_factory
from ticket_monitor.services.activity_feed import DEFAULT_HISTORY_LIMIT, ActivityFeed
from ticket_monitor.services.differ import diff_snapshots
from ticket_monitor.services.notification_store import DEFAULT_CAPACITY, NotificationStore
from ticket_monitor.services.snapshot_store import SnapshotStore
from ticket_monitor.services.subscriptions import NotificationSubscription
from ticket_monitor.services.ticket_stats import (
    SnapshotStats,
    TechnicianPerformance,
    compute_performance,
    compute_stats,
)
from ticket_monitor.services.transitions import TransitionAccumulator, TransitionMatrix

logger = logging.getLogger(__name__)


class TicketMonitor:
    """Owns the snapshot, the transition counts and the notification log.

    ``apply_batch`` is the only writer of the snapshot and the matrix. It runs
    synchronously to completion; the snapshot is swapped only after the whole
    diff pass has been processed.
    """

    def __init__(
        self,
        *,
        alert: AttentionNotifier | None = None,
        clock: Clock | None = None,
        notification_capacity: int = DEFAULT_CAPACITY,
        activity_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self._alert = alert
        self._clock = clock or SystemClock()
        self.snapshots = SnapshotStore()
        self.transitions = TransitionAccumulator()
        self.notifications = NotificationStore(notification_capacity)
        self.activity = ActivityFeed(activity_limit)
        self._last_rejected: tuple[MalformedSnapshotError, ...] = ()
        self._new_tickets = 0

    @property
    def new_tickets(self) -> int:
        """Tickets announced as created since the last ``reset_new_tickets``."""
        return self._new_tickets

    @property
    def last_rejected(self) -> tuple[MalformedSnapshotError, ...]:
        return self._last_rejected

    def apply_tickets(self, tickets: Iterable[TicketSnapshot]) -> list[ActivityEvent]:
        return self.apply_batch(TicketBatch(tickets=tuple(tickets)))

    def apply_batch(self, batch: TicketBatch) -> list[ActivityEvent]:
        now = self._clock.now()
        previous = self.snapshots.tickets
        current = {t.id: t for t in batch.tickets}

        for rejection in batch.rejected:
            logger.warning("Skipping malformed ticket this cycle: %s", rejection.detail)

        events = diff_snapshots(previous, current, now=now)

        for event in events:
            if isinstance(event, StatusChanged):
                self.transitions.record(event.old, event.new)
            elif isinstance(event, TicketCreated):
                self._new_tickets += 1
            self._raise_attention(event)

        self.activity.extend(events)
        for event in events:
            notification = notification_factory.from_event(event, now)
            if notification is not None:
                self.notifications.append(notification)

        # A rejected ticket keeps its last good version so it is neither
        # dropped nor announced as created once it parses again.
        committed = dict(current)
        for rejection in batch.rejected:
            tid = TicketId(rejection.ticket_id) if rejection.ticket_id else None
            if tid and tid not in committed and tid in previous:
                committed[tid] = previous[tid]

        self.snapshots.replace(committed.values(), now)
        self._last_rejected = batch.rejected

        if events:
            logger.info(
                "Detected %d activity events across %d tickets",
                len(events),
                len(committed),
            )
        else:
            logger.debug("No ticket activity (%d tickets)", len(committed))
        return events

    def _raise_attention(self, event: ActivityEvent) -> None:
        if self._alert is None:
            return
        try:
            self._alert.notify_attention_required(event)
        except Exception:
            logger.exception("Attention notifier failed for %s on %s", event.kind, event.ticket.id)

    # -- read side ------------------------------------------------------

    def _current(self, ticket: TicketSnapshot) -> TicketSnapshot:
        # Visibility follows the ticket as it stands now, not as it was when
        # the event fired. Tickets gone from the snapshot keep their last copy.
        return self.snapshots.get(ticket.id) or ticket

    def _can_see(self, viewer: Viewer, notification: Notification) -> bool:
        if notification.event is None:
            return is_notification_visible(viewer, notification)
        return is_notification_visible(
            viewer, notification, self._current(notification.event.ticket)
        )

    def get_transition_matrix(self) -> TransitionMatrix:
        return self.transitions.snapshot()

    def stats(self) -> SnapshotStats:
        return compute_stats(self.snapshots.tickets.values())

    def performance(self) -> list[TechnicianPerformance]:
        return compute_performance(self.snapshots.tickets.values())

    def reset_new_tickets(self) -> int:
        cleared, self._new_tickets = self._new_tickets, 0
        return cleared

    def subscribe(self, viewer: Viewer) -> NotificationSubscription:
        return NotificationSubscription(self.notifications, viewer)

    def notifications_for(self, viewer: Viewer, *, unread_only: bool = False) -> list[Notification]:
        return [
            n
            for n in self.notifications
            if self._can_see(viewer, n) and not (unread_only and n.read)
        ]

    def unread_count_for(self, viewer: Viewer) -> int:
        return len(self.notifications_for(viewer, unread_only=True))

    def mark_read_for(self, viewer: Viewer, notification_id: str) -> None:
        notification = self.notifications.get(notification_id)
        if notification is None or not self._can_see(viewer, notification):
            raise NotFoundError("Notification not found")
        self.notifications.mark_read(notification_id)

    def mark_all_read_for(self, viewer: Viewer) -> int:
        if viewer.is_admin:
            marked = self.notifications.unread_count
            self.notifications.mark_all_read()
            return marked
        visible = self.notifications_for(viewer, unread_only=True)
        for n in visible:
            self.notifications.mark_read(n.id)
        return len(visible)

    def activity_for(self, viewer: Viewer, limit: int | None = None) -> list[ActivityEvent]:
        visible = [
            e for e in self.activity.recent() if is_visible(viewer, e, self._current(e.ticket))
        ]
        return visible if limit is None else visible[:limit]

    # -- session events -------------------------------------------------

    def record_login(self, user: UserRef) -> Notification:
        notification = notification_factory.login(user, self._clock.now())
        self.notifications.append(notification)
        return notification

    def record_logout(self, user_id: UserId, user_name: str | None = None) -> Notification:
        notification = notification_factory.logout(user_id, self._clock.now(), user_name)
        self.notifications.append(notification)
        return notification
