"""Category service."""

import logging
from typing import Optional

from ..database import CatalogStore
from ..errors import ConflictError, NotFoundError, name_already_exists, not_found
from ..models import (
    Category,
    CategoryCreate,
    CategoryFilters,
    CategoryUpdate,
    CategoryView,
    Page,
    PageParams,
)
from .enrichment import ReadEnricher
from .integrity import ReferentialIntegrityRules
from .query_engine import QueryEngine

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for category operations."""

    def __init__(
        self,
        store: CatalogStore,
        query: QueryEngine,
        integrity: ReferentialIntegrityRules,
        enricher: ReadEnricher,
    ):
        self.store = store
        self.query = query
        self.integrity = integrity
        self.enricher = enricher

    def get_by_id(self, category_id: str) -> CategoryView:
        """Get category by ID."""
        return self.enricher.category_view(self._require(category_id))

    def list(self, filters: CategoryFilters, params: PageParams) -> Page:
        predicates = []
        if filters.status is not None:
            predicates.append(lambda c: c.status == filters.status)
        page = self.query.run(
            self.store.categories.values(),
            params,
            predicates=predicates,
            search=filters.search,
            search_fields=(lambda c: c.name,),
        )
        return page.map(self.enricher.category_view)

    def find_by_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[Category]:
        """Case-insensitive name lookup."""
        wanted = name.strip().lower()
        for category in self.store.categories.values():
            if category.id != exclude_id and category.name.strip().lower() == wanted:
                return category
        return None

    def create(self, payload: CategoryCreate) -> CategoryView:
        if self.find_by_name(payload.name) is not None:
            raise ConflictError(name_already_exists("Category"))

        now = self.store.now()
        category = Category(
            id=self.store.new_id('categories'),
            name=payload.name,
            image=payload.image,
            status=payload.status,
            created_at=now,
            updated_at=now,
        )
        self.store.categories[category.id] = category
        logger.info("Created category %s (%s)", category.id, category.name)
        return self.enricher.category_view(category)

    def update(self, category_id: str, payload: CategoryUpdate) -> CategoryView:
        category = self._require(category_id)
        changes = payload.changes()
        if 'name' in changes:
            if self.find_by_name(changes['name'], exclude_id=category_id) is not None:
                raise ConflictError(name_already_exists("Category"))

        changes['updated_at'] = self.store.now()
        updated = category.model_copy(update=changes)
        self.store.categories[category_id] = updated
        return self.enricher.category_view(updated)

    def delete(self, category_id: str) -> None:
        """Delete a category that no store references."""
        self._require(category_id)
        self.integrity.on_category_delete_requested(category_id)
        del self.store.categories[category_id]
        logger.info("Deleted category %s", category_id)

    def _require(self, category_id: str) -> Category:
        category = self.store.categories.get(category_id)
        if category is None:
            raise NotFoundError(not_found("Category"))
        return category
