"""Wiring of the catalog services around one store."""

import logging
import random
from typing import Optional

from ..config import CatalogConfig, catalog_config
from ..database import CatalogStore
from ..models import CatalogOverview
from ..utils.activation import is_flyer_active
from .audience import TargetAudienceResolver
from .category_service import CategoryService
from .collection_service import CollectionService
from .enrichment import ReadEnricher
from .flyer_service import FlyerService
from .hooks import HookRegistry
from .integrity import IntegrityChecker, ReferentialIntegrityRules
from .notification_engine import NotificationEngine
from .notification_service import NotificationService
from .query_engine import QueryEngine
from .store_service import StoreService
from .user_service import AppUserService

logger = logging.getLogger(__name__)


class Catalog:
    """All catalog services sharing one store, one hook registry and one config."""

    def __init__(
        self,
        store: Optional[CatalogStore] = None,
        config: CatalogConfig = catalog_config,
        rng: Optional[random.Random] = None,
    ):
        self.store = store if store is not None else CatalogStore()
        self.config = config

        self.hooks = HookRegistry()
        self.query = QueryEngine(config)
        self.integrity = ReferentialIntegrityRules(self.store)
        self.enricher = ReadEnricher(self.store)
        self.audience = TargetAudienceResolver(self.store, config, rng)
        self.checker = IntegrityChecker(self.store)

        self.categories = CategoryService(self.store, self.query, self.integrity, self.enricher)
        self.stores = StoreService(self.store, self.query, self.integrity, self.enricher, self.hooks)
        self.collections = CollectionService(
            self.store, self.query, self.integrity, self.enricher, self.hooks
        )
        self.flyers = FlyerService(
            self.store, self.query, self.integrity, self.enricher, self.hooks, self.collections
        )
        self.users = AppUserService(self.store, self.query, self.enricher)
        self.notifications = NotificationService(self.store, self.query, self.audience, config)

        self.notification_engine = NotificationEngine(self.store, self.audience, config)
        self.notification_engine.register(self.hooks)

    def overview(self) -> CatalogOverview:
        """Record counts for the dashboard landing page."""
        now = self.store.now()
        counts = self.store.counts()
        return CatalogOverview(
            active_flyers=sum(1 for f in self.store.flyers.values() if is_flyer_active(f, now)),
            **counts,
        )
