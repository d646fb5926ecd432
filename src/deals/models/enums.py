"""Closed value sets used across the catalog."""

from enum import Enum, IntEnum


class BasicStatus(IntEnum):
    """Enabled/disabled switch shared by categories, stores, collections and flyers."""

    DISABLE = 0
    ENABLE = 1


class UserStatus(IntEnum):
    """App user account status."""

    SUSPENDED = 0
    ACTIVE = 1
    PENDING_VERIFICATION = 2


class NotificationType(str, Enum):
    ADMIN_MESSAGE = "admin_message"
    NEW_STORE = "new_store"
    NEW_COLLECTION = "new_collection"
    DISCOUNT_ADDED = "discount_added"


class NotificationStatus(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    SENT = "sent"
    CANCELLED = "cancelled"


class NotificationTargetType(str, Enum):
    ALL_USERS = "all_users"
    CUSTOM_USERS = "custom_users"
    STORE_FOLLOWERS = "store_followers"
