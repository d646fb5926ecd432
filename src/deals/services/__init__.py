"""Catalog services."""

from .catalog import Catalog
from .category_service import CategoryService
from .store_service import StoreService
from .collection_service import CollectionService
from .flyer_service import FlyerService
from .user_service import AppUserService
from .notification_service import NotificationService
from .notification_engine import NotificationEngine
from .hooks import HookRegistry, MutationEvent, MutationResult
from .integrity import IntegrityChecker, IntegrityIssue, ReferentialIntegrityRules
from .query_engine import QueryEngine

__all__ = [
    'Catalog',
    'CategoryService', 'StoreService', 'CollectionService', 'FlyerService',
    'AppUserService', 'NotificationService', 'NotificationEngine',
    'HookRegistry', 'MutationEvent', 'MutationResult',
    'IntegrityChecker', 'IntegrityIssue', 'ReferentialIntegrityRules',
    'QueryEngine',
]
