"""Flyer service."""

import logging

from ..database import CatalogStore
from ..errors import NotFoundError, ValidationError, not_found
from ..models import (
    Flyer,
    FlyerCreate,
    FlyerFilters,
    FlyerUpdate,
    FlyerView,
    Page,
    PageParams,
)
from ..utils.activation import is_flyer_active
from ..utils.pricing import final_price
from .collection_service import CollectionService
from .enrichment import ReadEnricher
from .hooks import HookRegistry, MutationEvent, MutationResult
from .integrity import ReferentialIntegrityRules
from .query_engine import QueryEngine

logger = logging.getLogger(__name__)


class FlyerService:
    """Service for flyer operations.

    Flyers are created, updated and deleted through their collection; the
    ``store_id`` is always copied from that collection.
    """

    def __init__(
        self,
        store: CatalogStore,
        query: QueryEngine,
        integrity: ReferentialIntegrityRules,
        enricher: ReadEnricher,
        hooks: HookRegistry,
        collections: CollectionService,
    ):
        self.store = store
        self.query = query
        self.integrity = integrity
        self.enricher = enricher
        self.hooks = hooks
        self.collections = collections

    def get_by_id(self, flyer_id: str) -> FlyerView:
        """Get flyer by ID."""
        flyer = self.store.flyers.get(flyer_id)
        if flyer is None:
            raise NotFoundError(not_found("Flyer"))
        return self.enricher.flyer_view(flyer)

    def list(self, filters: FlyerFilters, params: PageParams) -> Page:
        """List flyers across all collections."""
        now = self.store.now()
        predicates = []
        if filters.collection_id:
            predicates.append(lambda f: f.collection_id == filters.collection_id)
        if filters.store_id:
            predicates.append(lambda f: f.store_id == filters.store_id)
        if filters.status is not None:
            predicates.append(lambda f: f.status == filters.status)
        if filters.active_only:
            predicates.append(lambda f: is_flyer_active(f, now))

        page = self.query.run(
            self.store.flyers.values(),
            params,
            predicates=predicates,
            search=filters.search,
            search_fields=(lambda f: f.name,),
        )
        return page.map(lambda f: self.enricher.flyer_view(f, now))

    def list_for_collection(self, collection_id: str, active_only: bool, params: PageParams) -> Page:
        """List the flyers of one collection."""
        self.collections.require(collection_id)
        return self.list(FlyerFilters(collection_id=collection_id, active_only=active_only), params)

    def create(self, collection_id: str, payload: FlyerCreate) -> MutationResult[FlyerView]:
        """Create a flyer in a collection.

        The final price is derived here, the collection's count and thumbnail
        are maintained, and a positive discount is announced to store followers.
        """
        collection = self.collections.require(collection_id)
        now = self.store.now()
        flyer = Flyer(
            id=self.store.new_id('flyers'),
            name=payload.name,
            image=payload.image,
            price=payload.price,
            discount_percentage=payload.discount_percentage,
            final_price=final_price(payload.price, payload.discount_percentage),
            collection_id=collection.id,
            store_id=collection.store_id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            status=payload.status,
            created_at=now,
            updated_at=now,
        )
        self.store.flyers[flyer.id] = flyer
        self.integrity.on_flyer_created(flyer)
        logger.info("Created flyer %s in collection %s", flyer.id, collection.id)

        triggered = self.hooks.fire(MutationEvent.FLYER_CREATED, flyer)
        return MutationResult(self.enricher.flyer_view(flyer), triggered)

    def update(self, collection_id: str, flyer_id: str, payload: FlyerUpdate) -> MutationResult[FlyerView]:
        """Update a flyer, re-deriving the final price when price or discount change."""
        flyer = self._require_in(collection_id, flyer_id)
        changes = payload.changes()

        start = changes.get('start_date', flyer.start_date)
        end = changes.get('end_date', flyer.end_date)
        if end <= start:
            raise ValidationError("End date must be after start date")

        if 'price' in changes or 'discount_percentage' in changes:
            changes['final_price'] = final_price(
                changes.get('price', flyer.price),
                changes.get('discount_percentage', flyer.discount_percentage),
            )
        changes['updated_at'] = self.store.now()

        updated = flyer.model_copy(update=changes)
        self.store.flyers[flyer_id] = updated

        triggered = self.hooks.fire(MutationEvent.FLYER_UPDATED, updated, previous=flyer)
        return MutationResult(self.enricher.flyer_view(updated), triggered)

    def delete(self, collection_id: str, flyer_id: str) -> None:
        flyer = self._require_in(collection_id, flyer_id)
        del self.store.flyers[flyer_id]
        self.integrity.on_flyer_deleted(flyer)
        logger.info("Deleted flyer %s from collection %s", flyer_id, collection_id)

    def _require_in(self, collection_id: str, flyer_id: str) -> Flyer:
        flyer = self.store.flyers.get(flyer_id)
        if flyer is None or flyer.collection_id != collection_id:
            raise NotFoundError(not_found("Flyer"))
        return flyer
