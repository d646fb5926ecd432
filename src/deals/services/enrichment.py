"""Read-time joins for display fields.

Nothing computed here is written back to the stored records.
"""

from datetime import datetime
from typing import Optional

from ..database import CatalogStore
from ..models import (
    AppUser,
    AppUserView,
    Category,
    CategoryView,
    Collection,
    CollectionView,
    Flyer,
    FlyerView,
    Store,
    StoreView,
)
from ..utils.activation import is_flyer_active

UNKNOWN_CATEGORY = "Unknown Category"
UNKNOWN_STORE = "Unknown Store"


class ReadEnricher:
    """Join stored records against the live catalog for display."""

    def __init__(self, store: CatalogStore):
        self.store = store

    def active_flyer_count(
        self,
        now: datetime,
        collection_id: Optional[str] = None,
        store_id: Optional[str] = None,
    ) -> int:
        count = 0
        for flyer in self.store.flyers.values():
            if collection_id is not None and flyer.collection_id != collection_id:
                continue
            if store_id is not None and flyer.store_id != store_id:
                continue
            if is_flyer_active(flyer, now):
                count += 1
        return count

    def store_name(self, store_id: str) -> str:
        store = self.store.stores.get(store_id)
        return store.name if store else UNKNOWN_STORE

    def category_view(self, category: Category) -> CategoryView:
        stores_count = sum(1 for s in self.store.stores.values() if s.category_id == category.id)
        return CategoryView(**dict(category), stores_count=stores_count)

    def store_view(self, store: Store, now: Optional[datetime] = None) -> StoreView:
        now = now or self.store.now()
        category = self.store.categories.get(store.category_id)
        return StoreView(
            **dict(store),
            category_name=category.name if category else UNKNOWN_CATEGORY,
            active_flyers_count=self.active_flyer_count(now, store_id=store.id),
        )

    def collection_view(self, collection: Collection, now: Optional[datetime] = None) -> CollectionView:
        now = now or self.store.now()
        thumbnail = self.store.flyers.get(collection.thumbnail_flyer_id or "")
        return CollectionView(
            **dict(collection),
            store_name=self.store_name(collection.store_id),
            active_flyers=self.active_flyer_count(now, collection_id=collection.id),
            thumbnail_image=thumbnail.image if thumbnail else None,
        )

    def flyer_view(self, flyer: Flyer, now: Optional[datetime] = None) -> FlyerView:
        now = now or self.store.now()
        collection = self.store.collections.get(flyer.collection_id)
        return FlyerView(
            **dict(flyer),
            is_active=is_flyer_active(flyer, now),
            store_name=self.store_name(flyer.store_id),
            collection_name=collection.name if collection else None,
        )

    def user_view(self, user: AppUser) -> AppUserView:
        return AppUserView(
            **dict(user),
            name=user.display_name,
            total_liked_flyers=len(user.liked_flyers),
            total_liked_stores=len(user.liked_stores),
        )
