from __future__ import annotations

from dataclasses import dataclass

import pytest

from ticket_monitor.application.dto.tickets import TicketBatch
from ticket_monitor.application.dto.viewer import Viewer
from ticket_monitor.application.exceptions import MalformedSnapshotError, NotFoundError
from ticket_monitor.domain.value_objects.enums import (
    ActivityKind,
    NotificationType,
    TicketPriority,
    TicketStatus,
    UserRole,
)
from ticket_monitor.domain.value_objects.ids import UserId
from ticket_monitor.services.monitor import TicketMonitor
from ticket_monitor.services.subscriptions import NotificationSubscription
from tests.conftest import RecordingAlert, make_comment, make_ticket, make_user

TECH = make_user("tech-7", UserRole.TECHNICIAN, name="Tech 7")


@pytest.fixture
def alert() -> RecordingAlert:
    return RecordingAlert()


@pytest.fixture
def monitor(clock, alert) -> TicketMonitor:
    return TicketMonitor(alert=alert, clock=clock)


def test_first_cycle_is_a_silent_baseline(monitor, alert):
    events = monitor.apply_tickets([make_ticket("T1"), make_ticket("T2")])

    assert events == []
    assert len(monitor.snapshots) == 2
    assert len(monitor.notifications) == 0
    assert alert.events == []


def test_accepted_ticket_end_to_end(monitor, alert):
    monitor.apply_tickets([make_ticket("T1", status=TicketStatus.OPEN)])
    events = monitor.apply_tickets(
        [make_ticket("T1", status=TicketStatus.IN_SERVICE, assigned_to=TECH)]
    )

    assert [e.kind for e in events] == [
        ActivityKind.STATUS_CHANGED,
        ActivityKind.ASSIGNED,
        ActivityKind.ACCEPTED,
    ]
    assert monitor.get_transition_matrix() == {"aberto": {"em_atendimento": 1}}
    assert [n.type for n in monitor.notifications] == [
        NotificationType.TICKET_ACCEPTED,
        NotificationType.TICKET_ASSIGNED,
        NotificationType.TICKET_UPDATED,
    ]
    assert alert.events == events
    assert monitor.snapshots.get("T1").status == TicketStatus.IN_SERVICE


def test_each_cycle_diffs_against_the_last_commit(monitor):
    monitor.apply_tickets([make_ticket("T1", status=TicketStatus.OPEN)])
    monitor.apply_tickets([make_ticket("T1", status=TicketStatus.PENDING)])
    monitor.apply_tickets([make_ticket("T1", status=TicketStatus.PENDING)])
    monitor.apply_tickets([make_ticket("T1", status=TicketStatus.CLOSED)])

    assert monitor.get_transition_matrix() == {
        "aberto": {"pendente": 1},
        "pendente": {"fechado": 1},
    }
    assert monitor.transitions.total == 2
    assert monitor.notifications.unread_count == 2


def test_malformed_ticket_keeps_last_good_version(monitor):
    monitor.apply_tickets([make_ticket("T1"), make_ticket("T2")])
    batch = TicketBatch(
        tickets=(make_ticket("T1", status=TicketStatus.PENDING),),
        rejected=(MalformedSnapshotError("T2", "status: invalid"),),
    )

    events = monitor.apply_batch(batch)

    assert [e.ticket.id for e in events] == ["T1"]
    assert monitor.snapshots.get("T2") is not None
    assert monitor.last_rejected == batch.rejected

    # Once T2 parses again it is compared, not announced as new.
    events = monitor.apply_tickets(
        [make_ticket("T1", status=TicketStatus.PENDING), make_ticket("T2")]
    )
    assert events == []


def test_alert_failure_does_not_abort_the_cycle(clock):
    @dataclass
    class BrokenAlert:
        def notify_attention_required(self, event):
            raise RuntimeError("speaker unplugged")

    monitor = TicketMonitor(alert=BrokenAlert(), clock=clock)
    monitor.apply_tickets([make_ticket("T1")])
    monitor.apply_tickets([make_ticket("T1", status=TicketStatus.RESOLVED)])

    assert monitor.transitions.total == 1
    assert len(monitor.notifications) == 1


def test_notifications_are_filtered_per_viewer(monitor, user_viewer, tech_viewer, admin_viewer):
    other = make_user("someone")
    monitor.apply_tickets([make_ticket("T1"), make_ticket("T2", created_by=other, assigned_to=TECH)])
    monitor.apply_tickets(
        [
            make_ticket("T1", status=TicketStatus.PENDING),
            make_ticket("T2", created_by=other, assigned_to=TECH, status=TicketStatus.RESOLVED),
        ]
    )

    assert {n.ticket_id for n in monitor.notifications_for(admin_viewer)} == {"T1", "T2"}
    assert {n.ticket_id for n in monitor.notifications_for(user_viewer)} == {"T1"}
    # T1 is unassigned, T2 is assigned to the technician.
    assert {n.ticket_id for n in monitor.notifications_for(tech_viewer)} == {"T1", "T2"}


def test_mark_read_respects_visibility(monitor, user_viewer, admin_viewer):
    monitor.apply_tickets([make_ticket("T1", created_by=make_user("someone"))])
    monitor.apply_tickets(
        [make_ticket("T1", created_by=make_user("someone"), status=TicketStatus.PENDING)]
    )
    (notification,) = monitor.notifications_for(admin_viewer)

    with pytest.raises(NotFoundError):
        monitor.mark_read_for(user_viewer, notification.id)
    with pytest.raises(NotFoundError):
        monitor.mark_read_for(admin_viewer, "notif-missing")

    monitor.mark_read_for(admin_viewer, notification.id)
    assert monitor.unread_count_for(admin_viewer) == 0
    assert monitor.notifications_for(admin_viewer, unread_only=True) == []


def test_mark_all_read_only_touches_visible(monitor, user_viewer, admin_viewer):
    other = make_user("someone")
    monitor.apply_tickets([make_ticket("T1"), make_ticket("T2", created_by=other)])
    monitor.apply_tickets(
        [
            make_ticket("T1", status=TicketStatus.PENDING),
            make_ticket("T2", created_by=other, status=TicketStatus.PENDING),
        ]
    )

    assert monitor.mark_all_read_for(user_viewer) == 1
    assert monitor.unread_count_for(admin_viewer) == 1
    assert monitor.mark_all_read_for(admin_viewer) == 1
    assert monitor.notifications.unread_count == 0


def test_activity_feed_is_newest_cycle_first(monitor, admin_viewer):
    monitor.apply_tickets([make_ticket("T1")])
    monitor.apply_tickets([make_ticket("T1", status=TicketStatus.PENDING)])
    monitor.apply_tickets([make_ticket("T1", status=TicketStatus.PENDING), make_ticket("T2")])

    kinds = [e.kind for e in monitor.activity_for(admin_viewer)]
    assert kinds == [ActivityKind.CREATED, ActivityKind.STATUS_CHANGED]
    assert len(monitor.activity_for(admin_viewer, limit=1)) == 1


def test_login_and_logout_are_logged(monitor, user_viewer, admin_viewer):
    monitor.record_login(make_user("creator", name="Creator"))
    monitor.record_logout("someone", "Someone")

    assert [n.type for n in monitor.notifications_for(admin_viewer)] == [
        NotificationType.LOGOUT,
        NotificationType.LOGIN,
    ]
    assert [n.type for n in monitor.notifications_for(user_viewer)] == [NotificationType.LOGIN]


@pytest.mark.asyncio
async def test_subscription_receives_visible_notifications_only(monitor, user_viewer):
    subscription = monitor.subscribe(user_viewer)
    other = make_user("someone")
    monitor.apply_tickets([make_ticket("T1"), make_ticket("T2", created_by=other)])
    monitor.apply_tickets(
        [
            make_ticket("T1", status=TicketStatus.PENDING),
            make_ticket("T2", created_by=other, status=TicketStatus.PENDING),
        ]
    )

    received = await anext(subscription)
    assert received.ticket_id == "T1"
    assert subscription.pending() == []

    subscription.close()
    monitor.record_logout("creator", "Creator")
    assert [n async for n in subscription] == []


def test_visibility_follows_the_current_assignee(monitor):
    tech_a = make_user("tech-a", UserRole.TECHNICIAN)
    viewer_a = Viewer(id=UserId("tech-a"), role=UserRole.TECHNICIAN)
    viewer_b = Viewer(id=UserId("tech-b"), role=UserRole.TECHNICIAN)
    other = make_user("someone")
    monitor.apply_tickets([make_ticket("T0", created_by=other)])
    monitor.apply_tickets(
        [make_ticket("T0", created_by=other), make_ticket("T1", created_by=other)]
    )

    # Unassigned: every technician sees the creation.
    assert [n.ticket_id for n in monitor.notifications_for(viewer_b)] == ["T1"]

    monitor.apply_tickets(
        [
            make_ticket("T0", created_by=other),
            make_ticket("T1", created_by=other, assigned_to=tech_a),
        ]
    )

    assert monitor.notifications_for(viewer_b) == []
    assert monitor.activity_for(viewer_b) == []
    assert [n.type for n in monitor.notifications_for(viewer_a)] == [
        NotificationType.TICKET_ASSIGNED,
        NotificationType.TICKET_CREATED,
    ]


def test_two_tickets_changing_status_in_one_cycle(monitor):
    monitor.apply_tickets([make_ticket("T1"), make_ticket("T2"), make_ticket("T3")])
    monitor.apply_tickets(
        [
            make_ticket("T1", status=TicketStatus.RESOLVED),
            make_ticket("T2", status=TicketStatus.RESOLVED),
            make_ticket("T3", status=TicketStatus.PENDING),
        ]
    )

    assert monitor.get_transition_matrix() == {"aberto": {"resolvido": 2, "pendente": 1}}
    assert monitor.transitions.total == 3


def test_new_legacy_comment_is_notified(monitor):
    monitor.apply_tickets([make_ticket("T1")])
    events = monitor.apply_tickets([make_ticket("T1", comments=(make_comment("c1"),))])

    assert [e.kind for e in events] == [ActivityKind.COMMENT_ADDED]
    (notification,) = monitor.notifications
    assert notification.type == NotificationType.COMMENT_ADDED


def test_new_ticket_counter_and_stats(monitor):
    tech = make_user("tech-7", UserRole.TECHNICIAN)
    monitor.apply_tickets([make_ticket("T1")])
    monitor.apply_tickets(
        [
            make_ticket("T1"),
            make_ticket("T2", priority=TicketPriority.CRITICAL, assigned_to=tech),
            make_ticket("T3", status=TicketStatus.RESOLVED),
        ]
    )

    assert monitor.new_tickets == 2
    stats = monitor.stats()
    assert stats.total == 3
    assert stats.unassigned == 2
    assert stats.by_status["aberto"] == 2
    assert stats.by_priority["critica"] == 1
    assert [p.technician_id for p in monitor.performance()] == ["tech-7"]

    assert monitor.reset_new_tickets() == 2
    assert monitor.new_tickets == 0


@pytest.mark.asyncio
async def test_slow_subscriber_keeps_only_the_newest(monitor, admin_viewer):
    subscription = NotificationSubscription(monitor.notifications, admin_viewer, maxsize=2)
    for name in ("a", "b", "c"):
        monitor.record_login(make_user(name))

    received = subscription.pending()

    assert [n.user_id for n in received] == ["b", "c"]
    assert subscription.dropped == 1
