"""Catalog data models."""

from .enums import BasicStatus, UserStatus, NotificationType, NotificationStatus, NotificationTargetType
from .catalog import (
    Category, CategoryView, CategoryCreate, CategoryUpdate,
    Store, StoreView, StoreCreate, StoreUpdate, StoreLocation, OpeningHours, Coordinates,
    Collection, CollectionView, CollectionCreate, CollectionUpdate,
    Flyer, FlyerView, FlyerCreate, FlyerUpdate,
)
from .user import AppUser, AppUserView, AppUserCreate, AppUserUpdate, UserLocation
from .notification import (
    Notification, NotificationTarget, NotificationCreate, NotificationUpdate, NotificationStats,
)
from .query import (
    PageParams, Page,
    CategoryFilters, StoreFilters, CollectionFilters, FlyerFilters, UserFilters, NotificationFilters,
)
from .stats import UserStats, CatalogOverview

__all__ = [
    'BasicStatus', 'UserStatus', 'NotificationType', 'NotificationStatus', 'NotificationTargetType',
    'Category', 'CategoryView', 'CategoryCreate', 'CategoryUpdate',
    'Store', 'StoreView', 'StoreCreate', 'StoreUpdate', 'StoreLocation', 'OpeningHours', 'Coordinates',
    'Collection', 'CollectionView', 'CollectionCreate', 'CollectionUpdate',
    'Flyer', 'FlyerView', 'FlyerCreate', 'FlyerUpdate',
    'AppUser', 'AppUserView', 'AppUserCreate', 'AppUserUpdate', 'UserLocation',
    'Notification', 'NotificationTarget', 'NotificationCreate', 'NotificationUpdate', 'NotificationStats',
    'PageParams', 'Page',
    'CategoryFilters', 'StoreFilters', 'CollectionFilters', 'FlyerFilters', 'UserFilters',
    'NotificationFilters',
    'UserStats', 'CatalogOverview',
]
