"""Store service."""

import logging
from typing import Optional

from ..database import CatalogStore
from ..errors import ConflictError, NotFoundError, name_already_exists, not_found
from ..models import (
    Page,
    PageParams,
    Store,
    StoreCreate,
    StoreFilters,
    StoreUpdate,
    StoreView,
)
from .enrichment import ReadEnricher
from .hooks import HookRegistry, MutationEvent, MutationResult
from .integrity import ReferentialIntegrityRules
from .query_engine import QueryEngine

logger = logging.getLogger(__name__)


class StoreService:
    """Service for store operations."""

    def __init__(
        self,
        store: CatalogStore,
        query: QueryEngine,
        integrity: ReferentialIntegrityRules,
        enricher: ReadEnricher,
        hooks: HookRegistry,
    ):
        self.store = store
        self.query = query
        self.integrity = integrity
        self.enricher = enricher
        self.hooks = hooks

    def get_by_id(self, store_id: str) -> StoreView:
        """Get store by ID."""
        return self.enricher.store_view(self._require(store_id))

    def list(self, filters: StoreFilters, params: PageParams) -> Page:
        """List stores with optional filtering."""
        predicates = []
        if filters.category_id:
            predicates.append(lambda s: s.category_id == filters.category_id)
        if filters.status is not None:
            predicates.append(lambda s: s.status == filters.status)
        if filters.city:
            predicates.append(lambda s: s.location.city == filters.city)

        page = self.query.run(
            self.store.stores.values(),
            params,
            predicates=predicates,
            search=filters.search,
            search_fields=(lambda s: s.name,),
        )
        now = self.store.now()
        return page.map(lambda s: self.enricher.store_view(s, now))

    def find_by_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[Store]:
        wanted = name.strip()
        for store in self.store.stores.values():
            if store.id != exclude_id and store.name.strip() == wanted:
                return store
        return None

    def create(self, payload: StoreCreate) -> MutationResult[StoreView]:
        """Create a store and announce it to all users."""
        if self.find_by_name(payload.name) is not None:
            raise ConflictError(name_already_exists("Store"))

        now = self.store.now()
        store = Store(
            id=self.store.new_id('stores'),
            created_at=now,
            updated_at=now,
            **dict(payload),
        )
        self.store.stores[store.id] = store
        logger.info("Created store %s (%s)", store.id, store.name)

        triggered = self.hooks.fire(MutationEvent.STORE_CREATED, store)
        return MutationResult(self.enricher.store_view(store), triggered)

    def update(self, store_id: str, payload: StoreUpdate) -> StoreView:
        """Update store information."""
        store = self._require(store_id)
        changes = payload.changes()
        if 'name' in changes:
            if self.find_by_name(changes['name'], exclude_id=store_id) is not None:
                raise ConflictError(name_already_exists("Store"))

        changes['updated_at'] = self.store.now()
        updated = store.model_copy(update=changes)
        self.store.stores[store_id] = updated
        return self.enricher.store_view(updated)

    def delete(self, store_id: str) -> int:
        """Delete a store together with its collections and their flyers.

        Returns the number of collections removed.
        """
        self._require(store_id)
        del self.store.stores[store_id]
        removed = self.integrity.on_store_deleted(store_id)
        logger.info("Deleted store %s", store_id)
        return removed

    def _require(self, store_id: str) -> Store:
        store = self.store.stores.get(store_id)
        if store is None:
            raise NotFoundError(not_found("Store"))
        return store
