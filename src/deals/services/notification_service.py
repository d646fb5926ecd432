"""Admin-authored notification service."""

import logging
import math
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional

from ..config import CatalogConfig, catalog_config
from ..database import CatalogStore
from ..errors import ConflictError, NotFoundError, ValidationError, not_found, notification_not_editable
from ..models import (
    Notification,
    NotificationCreate,
    NotificationFilters,
    NotificationStats,
    NotificationStatus,
    NotificationUpdate,
    Page,
    PageParams,
)
from .audience import TargetAudienceResolver
from .query_engine import QueryEngine

logger = logging.getLogger(__name__)

DRAFT = NotificationStatus.DRAFT
SCHEDULED = NotificationStatus.SCHEDULED
SENT = NotificationStatus.SENT
CANCELLED = NotificationStatus.CANCELLED

EDITABLE_STATUSES: FrozenSet[NotificationStatus] = frozenset({DRAFT, SCHEDULED})

# Legal moves for admin-authored notifications; SENT and CANCELLED are terminal
TRANSITIONS: Dict[NotificationStatus, FrozenSet[NotificationStatus]] = {
    DRAFT: frozenset({DRAFT, SCHEDULED}),
    SCHEDULED: frozenset({SCHEDULED, SENT, CANCELLED}),
    SENT: frozenset(),
    CANCELLED: frozenset(),
}


def can_transition(current: NotificationStatus, target: NotificationStatus) -> bool:
    return target in TRANSITIONS[current]


class NotificationService:
    """Service for admin notification operations and lifecycle."""

    def __init__(
        self,
        store: CatalogStore,
        query: QueryEngine,
        audience: TargetAudienceResolver,
        config: CatalogConfig = catalog_config,
    ):
        self.store = store
        self.query = query
        self.audience = audience
        self.config = config

    def get(self, notification_id: str) -> Notification:
        notification = self.store.notifications.get(notification_id)
        if notification is None:
            raise NotFoundError(not_found("Notification"))
        return notification

    def list(self, filters: NotificationFilters, params: PageParams) -> Page:
        """List notifications with optional filtering."""
        predicates = []
        if filters.type is not None:
            predicates.append(lambda n: n.type == filters.type)
        if filters.status is not None:
            predicates.append(lambda n: n.status == filters.status)
        if filters.target_type is not None:
            predicates.append(lambda n: n.target.type == filters.target_type)
        if filters.date_from is not None:
            predicates.append(lambda n: n.created_at >= filters.date_from)
        if filters.date_to is not None:
            predicates.append(lambda n: n.created_at <= filters.date_to)

        return self.query.run(
            self.store.notifications.values(),
            params,
            predicates=predicates,
            search=filters.search,
            search_fields=(lambda n: n.title, lambda n: n.message),
        )

    def create(self, payload: NotificationCreate, created_by: Optional[str] = None) -> Notification:
        """Create an admin notification.

        A future ``scheduled_for`` makes it SCHEDULED. Without a schedule it is
        sent immediately, unless ``send_now`` is explicitly false, which leaves
        a DRAFT.
        """
        now = self.store.now()
        if payload.scheduled_for is not None and payload.scheduled_for <= now:
            raise ValidationError("Scheduled time must be in the future")

        if payload.scheduled_for is not None:
            status = SCHEDULED
        elif payload.send_now is False:
            status = DRAFT
        else:
            status = SENT

        total = self.audience.resolve(payload.target)
        notification = Notification(
            id=self.store.new_id('notifications'),
            type=payload.type,
            title=payload.title,
            message=payload.message,
            target=payload.target,
            status=status,
            scheduled_for=payload.scheduled_for,
            created_at=now,
            updated_at=now,
            created_by=created_by or self.config.admin_id,
            related_store_id=payload.related_store_id,
            related_collection_id=payload.related_collection_id,
            related_flyer_id=payload.related_flyer_id,
            total_target_users=total,
        )
        if status == SENT:
            notification = self._mark_sent(notification, total, now)

        self.store.notifications[notification.id] = notification
        logger.info("Created %s notification %s", status.value, notification.id)
        return notification

    def update(self, notification_id: str, payload: NotificationUpdate) -> Notification:
        """Edit a draft or scheduled notification.

        The resulting status follows the merged schedule: a future time keeps
        or makes it SCHEDULED, no time leaves it a DRAFT.
        """
        notification = self.get(notification_id)
        if notification.status not in EDITABLE_STATUSES:
            raise ConflictError(notification_not_editable("update"))

        now = self.store.now()
        changes = payload.changes()
        scheduled_for = changes.get('scheduled_for', notification.scheduled_for)
        status = self._status_after_edit(
            notification.status, scheduled_for, 'scheduled_for' in changes, now
        )

        if 'target' in changes:
            changes['total_target_users'] = self.audience.resolve(changes['target'])
        changes.update(status=status, updated_at=now)

        updated = notification.model_copy(update=changes)
        self.store.notifications[notification_id] = updated
        return updated

    def delete(self, notification_id: str) -> None:
        notification = self.get(notification_id)
        if notification.status not in EDITABLE_STATUSES:
            raise ConflictError(notification_not_editable("delete"))
        del self.store.notifications[notification_id]
        logger.info("Deleted notification %s", notification_id)

    def cancel(self, notification_id: str) -> Notification:
        notification = self.get(notification_id)
        if notification.status != SCHEDULED:
            raise ConflictError("Can only cancel scheduled notifications")
        updated = notification.model_copy(update={
            'status': CANCELLED,
            'updated_at': self.store.now(),
        })
        self.store.notifications[notification_id] = updated
        return updated

    def send_now(self, notification_id: str) -> Notification:
        """Send a scheduled notification immediately, recomputing delivery figures."""
        notification = self.get(notification_id)
        if notification.status != SCHEDULED:
            raise ConflictError("Can only send scheduled notifications")
        now = self.store.now()
        total = self.audience.resolve(notification.target)
        updated = self._mark_sent(notification, total, now)
        self.store.notifications[notification_id] = updated
        logger.info("Sent scheduled notification %s to %d user(s)", notification_id, total)
        return updated

    def dispatch_due(self) -> List[Notification]:
        """Send every scheduled notification whose time has come."""
        now = self.store.now()
        due = [
            n.id for n in self.store.notifications.values()
            if n.status == SCHEDULED and n.scheduled_for is not None and n.scheduled_for <= now
        ]
        return [self.send_now(notification_id) for notification_id in due]

    def stats(self) -> NotificationStats:
        """Get notification statistics."""
        notifications = list(self.store.notifications.values())
        delivered = sum(n.delivered_count or 0 for n in notifications)
        read = sum(n.read_count or 0 for n in notifications)

        def count(status: NotificationStatus) -> int:
            return sum(1 for n in notifications if n.status == status)

        return NotificationStats(
            total=len(notifications),
            sent=count(SENT),
            scheduled=count(SCHEDULED),
            drafts=count(DRAFT),
            cancelled=count(CANCELLED),
            delivered=delivered,
            read=read,
            # half-up rounding
            read_rate=math.floor(read / delivered * 100 + 0.5) if delivered > 0 else 0,
        )

    def _status_after_edit(
        self,
        current: NotificationStatus,
        scheduled_for: Optional[datetime],
        schedule_changed: bool,
        now: datetime,
    ) -> NotificationStatus:
        if scheduled_for is None:
            target = DRAFT
        elif scheduled_for > now:
            target = SCHEDULED
        elif schedule_changed:
            raise ValidationError("Scheduled time must be in the future")
        else:
            # Already due; leave it for send-now or dispatch
            target = current

        if not can_transition(current, target):
            raise ConflictError(
                f"Cannot move a {current.value} notification to {target.value}; cancel it instead"
            )
        return target

    def _mark_sent(self, notification: Notification, total: int, now: datetime) -> Notification:
        return notification.model_copy(update={
            'status': SENT,
            'sent_at': now,
            'updated_at': now,
            'total_target_users': total,
            'delivered_count': total,
            'read_count': math.floor(total * self.config.manual_read_rate),
        })
