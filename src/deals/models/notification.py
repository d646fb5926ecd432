"""Notification data models."""

from typing import ClassVar, FrozenSet, List, Optional

from pydantic import Field, model_validator

from .base import CatalogModel, Entity, Payload, UpdatePayload, UtcDatetime
from .enums import NotificationStatus, NotificationTargetType, NotificationType

SYSTEM_AUTHOR = "system"


class NotificationTarget(CatalogModel):
    """Who a notification is meant for."""

    type: NotificationTargetType
    user_ids: List[str] = Field(default_factory=list)
    store_id: Optional[str] = None

    @model_validator(mode='after')
    def _check_target(self) -> 'NotificationTarget':
        if self.type == NotificationTargetType.STORE_FOLLOWERS and not self.store_id:
            raise ValueError("storeId is required for store follower targets")
        return self


class Notification(Entity):
    """Notification model.

    Delivery counters are simulated and only set once the notification is sent.
    """

    type: NotificationType
    title: str
    message: str
    target: NotificationTarget
    status: NotificationStatus
    scheduled_for: Optional[UtcDatetime] = None
    sent_at: Optional[UtcDatetime] = None
    created_by: str = SYSTEM_AUTHOR
    related_store_id: Optional[str] = None
    related_collection_id: Optional[str] = None
    related_flyer_id: Optional[str] = None
    total_target_users: Optional[int] = None
    delivered_count: Optional[int] = None
    read_count: Optional[int] = None


class NotificationCreate(Payload):
    type: NotificationType = NotificationType.ADMIN_MESSAGE
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1, max_length=2000)
    target: NotificationTarget
    scheduled_for: Optional[UtcDatetime] = None
    # None means "send now unless a schedule is given"
    send_now: Optional[bool] = None
    related_store_id: Optional[str] = None
    related_collection_id: Optional[str] = None
    related_flyer_id: Optional[str] = None


class NotificationUpdate(UpdatePayload):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"scheduled_for"})

    type: Optional[NotificationType] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    message: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    target: Optional[NotificationTarget] = None
    scheduled_for: Optional[UtcDatetime] = None


class NotificationStats(CatalogModel):
    total: int = 0
    sent: int = 0
    scheduled: int = 0
    drafts: int = 0
    cancelled: int = 0
    delivered: int = 0
    read: int = 0
    read_rate: int = 0
