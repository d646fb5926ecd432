"""Tests for auto-notifications and hook isolation."""

import logging
from decimal import Decimal

import pytest

from deals.models import (
    AppUserCreate,
    NotificationStatus,
    NotificationTargetType,
    NotificationType,
    StoreCreate,
)
from deals.models.notification import SYSTEM_AUTHOR
from deals.services import HookRegistry, MutationEvent
from deals.services.notification_engine import discount_increased


@pytest.mark.parametrize('previous, current, expected', [
    (None, Decimal('30'), True),
    (None, Decimal('0'), False),
    (Decimal('10'), Decimal('30'), True),
    (Decimal('30'), Decimal('30'), False),
    (Decimal('30'), Decimal('20'), False),
])
def test_discount_increased(previous, current, expected):
    assert discount_increased(previous, current) is expected


def test_new_store_notification(catalog, clock):
    for i in range(3):
        catalog.users.create(AppUserCreate(email=f"user{i}@example.com"))

    result = catalog.stores.create(StoreCreate(name="IKEA", category_id="cat-5"))

    (notification,) = result.triggered
    assert notification.title == "New Store: IKEA"
    assert notification.status == NotificationStatus.SENT
    assert notification.created_by == SYSTEM_AUTHOR
    assert notification.sent_at == clock.now
    assert notification.related_store_id == result.record.id
    assert notification.total_target_users == 3
    assert notification.delivered_count == 3
    assert notification.read_count == 1
    assert catalog.store.notifications[notification.id] == notification


def test_new_collection_uses_follower_estimate(catalog, config, make_collection):
    make_collection(name="Fall Catalog")

    notification = [
        n for n in catalog.store.notifications.values() if n.type == NotificationType.NEW_COLLECTION
    ][0]
    assert notification.target.type == NotificationTargetType.STORE_FOLLOWERS
    assert notification.total_target_users == config.follower_estimate_min
    assert notification.read_count == int(config.follower_estimate_min * 0.6)


def test_discount_notification_text(catalog, make_store, make_collection, make_flyer):
    shop = make_store(name="IKEA")
    collection = make_collection(name="Fall Catalog", store_id=shop.id)

    flyer = make_flyer(collection.id, name="Sofa", discount="12.50")

    notification = [
        n for n in catalog.store.notifications.values() if n.type == NotificationType.DISCOUNT_ADDED
    ][0]
    assert notification.title == "🔥 12.5% OFF - Sofa"
    assert 'IKEA is offering 12.5% discount on "Sofa"' in notification.message
    assert notification.related_flyer_id == flyer.id
    assert notification.related_collection_id == collection.id


def test_failing_hook_does_not_fail_the_mutation(catalog, caplog):
    def broken(outcome):
        raise RuntimeError("push gateway down")

    catalog.hooks.register(MutationEvent.STORE_CREATED, broken)

    with caplog.at_level(logging.ERROR):
        result = catalog.stores.create(StoreCreate(name="IKEA", category_id="cat-5"))

    assert result.record.id in catalog.store.stores
    # The built-in notification hook still ran
    assert len(result.triggered) == 1
    assert "push gateway down" in caplog.text


def test_failing_notification_synthesis_is_swallowed(catalog, monkeypatch):
    def explode(target):
        raise RuntimeError("resolver unavailable")

    monkeypatch.setattr(catalog.audience, 'resolve', explode)

    result = catalog.stores.create(StoreCreate(name="IKEA", category_id="cat-5"))

    assert result.triggered == ()
    assert result.record.id in catalog.store.stores
    assert catalog.store.notifications == {}


def test_registry_fires_in_registration_order():
    hooks = HookRegistry()
    hooks.register(MutationEvent.FLYER_CREATED, lambda outcome: "first")
    hooks.register(MutationEvent.FLYER_CREATED, lambda outcome: None)
    hooks.register(MutationEvent.FLYER_CREATED, lambda outcome: outcome.record)

    assert hooks.fire(MutationEvent.FLYER_CREATED, "flyer") == ("first", "flyer")
    assert hooks.fire(MutationEvent.STORE_CREATED, "store") == ()
