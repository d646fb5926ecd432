"""Tests for admin notifications and their lifecycle."""

from datetime import timedelta

import pytest

from deals.errors import ConflictError, NotFoundError, ValidationError
from deals.models import (
    AppUserCreate,
    NotificationCreate,
    NotificationFilters,
    NotificationStatus,
    NotificationTarget,
    NotificationTargetType,
    NotificationType,
    NotificationUpdate,
    PageParams,
)
from deals.services.notification_service import can_transition

ALL_USERS = NotificationTarget(type=NotificationTargetType.ALL_USERS)


@pytest.fixture
def ten_users(catalog):
    for i in range(10):
        catalog.users.create(AppUserCreate(email=f"user{i}@example.com"))


@pytest.fixture
def notify(catalog):
    def make(title="Weekend deals", **kwargs):
        kwargs.setdefault('target', ALL_USERS)
        return catalog.notifications.create(NotificationCreate(title=title, message="Check them out", **kwargs))
    return make


def test_create_without_schedule_sends_immediately(catalog, ten_users, notify, clock):
    notification = notify()

    assert notification.status == NotificationStatus.SENT
    assert notification.type == NotificationType.ADMIN_MESSAGE
    assert notification.sent_at == clock.now
    assert notification.created_by == "admin-1"
    assert notification.total_target_users == 10
    assert notification.delivered_count == 10
    assert notification.read_count == 7


def test_create_with_send_now_false_is_draft(catalog, ten_users, notify):
    notification = notify(send_now=False)

    assert notification.status == NotificationStatus.DRAFT
    assert notification.sent_at is None
    assert notification.delivered_count is None
    assert notification.total_target_users == 10


def test_create_with_future_schedule(catalog, notify, clock):
    notification = notify(scheduled_for=clock.now + timedelta(hours=2))

    assert notification.status == NotificationStatus.SCHEDULED


def test_create_with_past_schedule_is_rejected(catalog, notify, clock):
    with pytest.raises(ValidationError):
        notify(scheduled_for=clock.now - timedelta(minutes=1))


def test_custom_users_target_counts_ids(catalog, notify):
    notification = notify(target=NotificationTarget(
        type=NotificationTargetType.CUSTOM_USERS, user_ids=["u1", "u2", "u3"],
    ))

    assert notification.total_target_users == 3


def test_cancel_twice_fails_the_second_time(catalog, notify, clock):
    notification = notify(scheduled_for=clock.now + timedelta(hours=2))

    cancelled = catalog.notifications.cancel(notification.id)

    assert cancelled.status == NotificationStatus.CANCELLED
    with pytest.raises(ConflictError, match="Can only cancel scheduled notifications"):
        catalog.notifications.cancel(notification.id)


def test_send_now_marks_scheduled_as_sent(catalog, ten_users, notify, clock):
    notification = notify(scheduled_for=clock.now + timedelta(days=1))
    clock.advance(minutes=5)

    sent = catalog.notifications.send_now(notification.id)

    assert sent.status == NotificationStatus.SENT
    assert sent.sent_at == clock.now
    assert sent.delivered_count == 10
    assert sent.read_count == 7


def test_send_now_requires_scheduled(catalog, notify):
    draft = notify(send_now=False)

    with pytest.raises(ConflictError, match="Can only send scheduled notifications"):
        catalog.notifications.send_now(draft.id)


def test_sent_notification_cannot_be_edited_or_deleted(catalog, notify):
    sent = notify()

    with pytest.raises(ConflictError, match="Cannot update notification that has already been sent or cancelled"):
        catalog.notifications.update(sent.id, NotificationUpdate(title="Changed"))
    with pytest.raises(ConflictError, match="Cannot delete notification"):
        catalog.notifications.delete(sent.id)


def test_scheduling_a_draft(catalog, notify, clock):
    draft = notify(send_now=False)

    updated = catalog.notifications.update(
        draft.id, NotificationUpdate(scheduled_for=clock.now + timedelta(hours=1))
    )

    assert updated.status == NotificationStatus.SCHEDULED


def test_unscheduling_is_not_allowed(catalog, notify, clock):
    scheduled = notify(scheduled_for=clock.now + timedelta(hours=1))

    with pytest.raises(ConflictError):
        catalog.notifications.update(scheduled.id, NotificationUpdate.model_validate({'scheduledFor': None}))


def test_rescheduling_into_the_past_is_rejected(catalog, notify, clock):
    scheduled = notify(scheduled_for=clock.now + timedelta(hours=1))

    with pytest.raises(ValidationError):
        catalog.notifications.update(
            scheduled.id, NotificationUpdate(scheduled_for=clock.now - timedelta(hours=1))
        )


def test_editing_due_notification_keeps_status(catalog, notify, clock):
    scheduled = notify(scheduled_for=clock.now + timedelta(hours=1))
    clock.advance(hours=2)

    updated = catalog.notifications.update(scheduled.id, NotificationUpdate(title="Still due"))

    assert updated.status == NotificationStatus.SCHEDULED
    assert updated.title == "Still due"


def test_changing_target_recomputes_audience(catalog, ten_users, notify):
    draft = notify(send_now=False)

    updated = catalog.notifications.update(draft.id, NotificationUpdate(target=NotificationTarget(
        type=NotificationTargetType.CUSTOM_USERS, user_ids=["u1"],
    )))

    assert updated.total_target_users == 1


def test_delete_draft(catalog, notify):
    draft = notify(send_now=False)

    catalog.notifications.delete(draft.id)

    with pytest.raises(NotFoundError, match="Notification not found"):
        catalog.notifications.get(draft.id)


def test_dispatch_due_sends_only_due(catalog, notify, clock):
    soon = notify(title="Soon", scheduled_for=clock.now + timedelta(hours=1))
    later = notify(title="Later", scheduled_for=clock.now + timedelta(days=3))
    clock.advance(hours=2)

    dispatched = catalog.notifications.dispatch_due()

    assert [n.id for n in dispatched] == [soon.id]
    assert catalog.notifications.get(later.id).status == NotificationStatus.SCHEDULED


def test_stats(catalog, ten_users, notify, clock):
    notify()
    notify(target=NotificationTarget(type=NotificationTargetType.CUSTOM_USERS, user_ids=["a", "b", "c"]))
    notify(send_now=False)
    cancelled = notify(scheduled_for=clock.now + timedelta(hours=1))
    catalog.notifications.cancel(cancelled.id)
    notify(scheduled_for=clock.now + timedelta(hours=1))

    stats = catalog.notifications.stats()

    assert stats.total == 5
    assert stats.sent == 2
    assert stats.scheduled == 1
    assert stats.drafts == 1
    assert stats.cancelled == 1
    assert stats.delivered == 13
    assert stats.read == 9
    assert stats.read_rate == 69


def test_stats_without_deliveries(catalog):
    assert catalog.notifications.stats().read_rate == 0


def test_list_filters(catalog, notify, clock):
    notify(title="Weekend deals")
    clock.advance(days=1)
    notify(title="Holiday hours", send_now=False)
    clock.advance(days=1)
    notify(title="Flash sale", target=NotificationTarget(
        type=NotificationTargetType.STORE_FOLLOWERS, store_id="store-1",
    ))

    params = PageParams(page=1, limit=10)

    def titles(**filters):
        return [n.title for n in catalog.notifications.list(NotificationFilters(**filters), params).items]

    assert titles() == ["Flash sale", "Holiday hours", "Weekend deals"]
    assert titles(status=NotificationStatus.DRAFT) == ["Holiday hours"]
    assert titles(target_type=NotificationTargetType.STORE_FOLLOWERS) == ["Flash sale"]
    assert titles(search="HOLIDAY") == ["Holiday hours"]
    assert titles(date_from=clock.now - timedelta(days=1)) == ["Flash sale", "Holiday hours"]
    assert titles(date_to=clock.now - timedelta(days=1)) == ["Holiday hours", "Weekend deals"]


@pytest.mark.parametrize('current, target, allowed', [
    (NotificationStatus.DRAFT, NotificationStatus.SCHEDULED, True),
    (NotificationStatus.SCHEDULED, NotificationStatus.DRAFT, False),
    (NotificationStatus.SCHEDULED, NotificationStatus.CANCELLED, True),
    (NotificationStatus.SENT, NotificationStatus.SCHEDULED, False),
    (NotificationStatus.CANCELLED, NotificationStatus.SCHEDULED, False),
])
def test_transitions(current, target, allowed):
    assert can_transition(current, target) is allowed
