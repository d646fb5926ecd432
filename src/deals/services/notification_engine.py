"""System notifications synthesized from catalog mutations."""

import logging
import math
from decimal import Decimal
from typing import Optional

from ..config import CatalogConfig, catalog_config
from ..database import CatalogStore
from ..models import (
    Collection,
    Flyer,
    Notification,
    NotificationStatus,
    NotificationTarget,
    NotificationTargetType,
    NotificationType,
    Store,
)
from ..models.notification import SYSTEM_AUTHOR
from ..utils.pricing import format_percent
from .audience import TargetAudienceResolver
from .enrichment import UNKNOWN_STORE
from .hooks import HookRegistry, MutationEvent, MutationOutcome

logger = logging.getLogger(__name__)


def discount_increased(previous: Optional[Decimal], current: Decimal) -> bool:
    """A discount counts as added when it is positive and above the prior value."""
    return current > 0 and current > (previous or Decimal(0))


class NotificationEngine:
    """Auto-notifications for new stores, new collections and new discounts.

    Every notification produced here is marked sent straight away with
    simulated delivery figures; it never goes through draft or scheduling.
    """

    def __init__(
        self,
        store: CatalogStore,
        audience: TargetAudienceResolver,
        config: CatalogConfig = catalog_config,
    ):
        self.store = store
        self.audience = audience
        self.config = config

    def register(self, hooks: HookRegistry) -> None:
        """Declare which mutations trigger a notification."""
        hooks.register(MutationEvent.STORE_CREATED, self.on_store_created)
        hooks.register(MutationEvent.COLLECTION_CREATED, self.on_collection_created)
        hooks.register(MutationEvent.FLYER_CREATED, self.on_flyer_created)
        hooks.register(MutationEvent.FLYER_UPDATED, self.on_flyer_updated)

    def on_store_created(self, outcome: MutationOutcome) -> Notification:
        store: Store = outcome.record
        return self.synthesize(
            NotificationType.NEW_STORE,
            title=f"New Store: {store.name}",
            message=(
                f'A new store "{store.name}" has joined our platform! '
                "Check out their collections and exclusive offers."
            ),
            target=NotificationTarget(type=NotificationTargetType.ALL_USERS),
            related_store_id=store.id,
        )

    def on_collection_created(self, outcome: MutationOutcome) -> Notification:
        collection: Collection = outcome.record
        store_name = self._store_name(collection.store_id)
        return self.synthesize(
            NotificationType.NEW_COLLECTION,
            title=f"New Collection: {collection.name}",
            message=(
                f'{store_name} just launched a new collection "{collection.name}". '
                "Discover the latest products now!"
            ),
            target=NotificationTarget(
                type=NotificationTargetType.STORE_FOLLOWERS, store_id=collection.store_id
            ),
            related_store_id=collection.store_id,
            related_collection_id=collection.id,
        )

    def on_flyer_created(self, outcome: MutationOutcome) -> Optional[Notification]:
        flyer: Flyer = outcome.record
        if not discount_increased(None, flyer.discount_percentage):
            return None
        return self._discount_notification(flyer)

    def on_flyer_updated(self, outcome: MutationOutcome) -> Optional[Notification]:
        flyer: Flyer = outcome.record
        previous: Flyer = outcome.previous
        old = previous.discount_percentage if previous is not None else None
        if not discount_increased(old, flyer.discount_percentage):
            return None
        return self._discount_notification(flyer)

    def _discount_notification(self, flyer: Flyer) -> Notification:
        percent = format_percent(flyer.discount_percentage)
        store_name = self._store_name(flyer.store_id)
        return self.synthesize(
            NotificationType.DISCOUNT_ADDED,
            title=f"🔥 {percent}% OFF - {flyer.name}",
            message=(
                f'Don\'t miss out! {store_name} is offering {percent}% discount on "{flyer.name}". '
                "Limited time offer!"
            ),
            target=NotificationTarget(
                type=NotificationTargetType.STORE_FOLLOWERS, store_id=flyer.store_id
            ),
            related_store_id=flyer.store_id,
            related_collection_id=flyer.collection_id,
            related_flyer_id=flyer.id,
        )

    def _store_name(self, store_id: str) -> str:
        store = self.store.stores.get(store_id)
        return store.name if store else UNKNOWN_STORE

    def synthesize(
        self,
        notification_type: NotificationType,
        title: str,
        message: str,
        target: NotificationTarget,
        related_store_id: Optional[str] = None,
        related_collection_id: Optional[str] = None,
        related_flyer_id: Optional[str] = None,
    ) -> Notification:
        """Insert a sent system notification with simulated delivery figures."""
        now = self.store.now()
        total = self.audience.resolve(target)
        notification = Notification(
            id=self.store.new_id('notifications'),
            type=notification_type,
            title=title,
            message=message,
            target=target,
            status=NotificationStatus.SENT,
            sent_at=now,
            created_at=now,
            updated_at=now,
            created_by=SYSTEM_AUTHOR,
            related_store_id=related_store_id,
            related_collection_id=related_collection_id,
            related_flyer_id=related_flyer_id,
            total_target_users=total,
            delivered_count=total,
            read_count=math.floor(total * self.config.auto_read_rate),
        )
        self.store.notifications[notification.id] = notification
        logger.info("Sent %s notification %s to %d user(s)", notification_type.value, notification.id, total)
        return notification
