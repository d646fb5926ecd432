"""Collection service."""

import logging

from ..database import CatalogStore
from ..errors import NotFoundError, ValidationError, not_found
from ..models import (
    Collection,
    CollectionCreate,
    CollectionFilters,
    CollectionUpdate,
    CollectionView,
    Page,
    PageParams,
)
from .enrichment import ReadEnricher
from .hooks import HookRegistry, MutationEvent, MutationResult
from .integrity import ReferentialIntegrityRules
from .query_engine import QueryEngine

logger = logging.getLogger(__name__)


class CollectionService:
    """Service for collection operations."""

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

    def get_by_id(self, collection_id: str) -> CollectionView:
        """Get collection by ID."""
        return self.enricher.collection_view(self.require(collection_id))

    def list(self, filters: CollectionFilters, params: PageParams) -> Page:
        """List collections; ``active_only`` keeps those with at least one live flyer."""
        now = self.store.now()
        predicates = []
        if filters.store_id:
            predicates.append(lambda c: c.store_id == filters.store_id)
        if filters.status is not None:
            predicates.append(lambda c: c.status == filters.status)
        if filters.active_only:
            predicates.append(
                lambda c: self.enricher.active_flyer_count(now, collection_id=c.id) > 0
            )

        page = self.query.run(
            self.store.collections.values(),
            params,
            predicates=predicates,
            search=filters.search,
            search_fields=(lambda c: c.name,),
        )
        return page.map(lambda c: self.enricher.collection_view(c, now))

    def create(self, payload: CollectionCreate) -> MutationResult[CollectionView]:
        """Create a collection under an existing store and tell its followers."""
        owner = self.store.stores.get(payload.store_id)
        if owner is None:
            raise NotFoundError(not_found("Store"))

        now = self.store.now()
        collection = Collection(
            id=self.store.new_id('collections'),
            name=payload.name,
            store_id=owner.id,
            category_id=payload.category_id or owner.category_id,
            thumbnail_flyer_id=None,
            flyers_count=0,
            status=payload.status,
            created_at=now,
            updated_at=now,
        )
        self.store.collections[collection.id] = collection
        logger.info("Created collection %s (%s) for store %s", collection.id, collection.name, owner.id)

        triggered = self.hooks.fire(MutationEvent.COLLECTION_CREATED, collection)
        return MutationResult(self.enricher.collection_view(collection), triggered)

    def update(self, collection_id: str, payload: CollectionUpdate) -> CollectionView:
        collection = self.require(collection_id)
        changes = payload.changes()

        if 'store_id' in changes and changes['store_id'] not in self.store.stores:
            raise NotFoundError(not_found("Store"))
        if changes.get('thumbnail_flyer_id') is not None:
            self._check_thumbnail(collection_id, changes['thumbnail_flyer_id'])

        changes['updated_at'] = self.store.now()
        updated = collection.model_copy(update=changes)
        self.store.collections[collection_id] = updated
        if updated.store_id != collection.store_id:
            self.integrity.on_collection_store_changed(updated)
        return self.enricher.collection_view(updated)

    def set_thumbnail(self, collection_id: str, flyer_id: str) -> CollectionView:
        """Pick which of the collection's flyers represents it."""
        return self.update(collection_id, CollectionUpdate(thumbnail_flyer_id=flyer_id))

    def delete(self, collection_id: str) -> int:
        """Delete a collection and its flyers. Returns the number of flyers removed."""
        self.require(collection_id)
        del self.store.collections[collection_id]
        removed = self.integrity.on_collection_deleted(collection_id)
        logger.info("Deleted collection %s", collection_id)
        return removed

    def require(self, collection_id: str) -> Collection:
        collection = self.store.collections.get(collection_id)
        if collection is None:
            raise NotFoundError(not_found("Collection"))
        return collection

    def _check_thumbnail(self, collection_id: str, flyer_id: str) -> None:
        flyer = self.store.flyers.get(flyer_id)
        if flyer is None or flyer.collection_id != collection_id:
            raise ValidationError("Thumbnail flyer must belong to the collection")
