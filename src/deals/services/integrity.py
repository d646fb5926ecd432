"""Referential integrity rules run inside catalog mutations."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..database import CatalogStore
from ..errors import CategoryInUseError
from ..models import Collection, Flyer

logger = logging.getLogger(__name__)


class ReferentialIntegrityRules:
    """Cascades and guards invoked synchronously by the services.

    Each rule finishes before the calling mutation returns, so there is no
    partially applied state between a primary mutation and its cascade.
    """

    def __init__(self, store: CatalogStore):
        self.store = store

    def stores_in_category(self, category_id: str) -> int:
        return sum(1 for store in self.store.stores.values() if store.category_id == category_id)

    def flyers_in_collection(self, collection_id: str) -> List[Flyer]:
        return [flyer for flyer in self.store.flyers.values() if flyer.collection_id == collection_id]

    def on_category_delete_requested(self, category_id: str) -> None:
        """Refuse to delete a category while stores still point at it."""
        count = self.stores_in_category(category_id)
        if count > 0:
            raise CategoryInUseError(category_id, count)

    def on_collection_deleted(self, collection_id: str) -> int:
        """Delete every flyer of the collection. Returns how many were removed."""
        doomed = [flyer.id for flyer in self.flyers_in_collection(collection_id)]
        for flyer_id in doomed:
            del self.store.flyers[flyer_id]
        if doomed:
            logger.info("Removed %d flyer(s) of deleted collection %s", len(doomed), collection_id)
        return len(doomed)

    def on_store_deleted(self, store_id: str) -> int:
        """Delete the store's collections, cascading to their flyers.

        Returns the number of collections removed.
        """
        doomed = [c.id for c in self.store.collections.values() if c.store_id == store_id]
        for collection_id in doomed:
            del self.store.collections[collection_id]
            self.on_collection_deleted(collection_id)
        # Flyers whose collection was already gone but still carry the store id
        orphans = [f.id for f in self.store.flyers.values() if f.store_id == store_id]
        for flyer_id in orphans:
            del self.store.flyers[flyer_id]
        if doomed or orphans:
            logger.info(
                "Removed %d collection(s) and %d orphan flyer(s) of deleted store %s",
                len(doomed), len(orphans), store_id,
            )
        return len(doomed)

    def on_flyer_created(self, flyer: Flyer) -> Optional[Collection]:
        """Bump the collection's flyer count and claim the thumbnail if unset."""
        collection = self.store.collections.get(flyer.collection_id)
        if collection is None:
            return None
        updated = collection.model_copy(update={
            'flyers_count': collection.flyers_count + 1,
            'thumbnail_flyer_id': collection.thumbnail_flyer_id or flyer.id,
            'updated_at': self.store.now(),
        })
        self.store.collections[collection.id] = updated
        return updated

    def on_flyer_deleted(self, flyer: Flyer) -> Optional[Collection]:
        """Drop the collection's flyer count and move the thumbnail off the deleted flyer."""
        collection = self.store.collections.get(flyer.collection_id)
        if collection is None:
            return None
        thumbnail_id = collection.thumbnail_flyer_id
        if thumbnail_id == flyer.id:
            remaining = self.flyers_in_collection(collection.id)
            thumbnail_id = remaining[0].id if remaining else None
        updated = collection.model_copy(update={
            'flyers_count': max(0, collection.flyers_count - 1),
            'thumbnail_flyer_id': thumbnail_id,
            'updated_at': self.store.now(),
        })
        self.store.collections[collection.id] = updated
        return updated

    def on_collection_store_changed(self, collection: Collection) -> int:
        """Re-point the denormalized store id of every flyer in the collection."""
        moved = 0
        now = self.store.now()
        for flyer in self.flyers_in_collection(collection.id):
            if flyer.store_id != collection.store_id:
                self.store.flyers[flyer.id] = flyer.model_copy(
                    update={'store_id': collection.store_id, 'updated_at': now}
                )
                moved += 1
        return moved


@dataclass(frozen=True)
class IntegrityIssue:
    entity: str
    entity_id: str
    field: str
    stored: object
    expected: object

    def describe(self) -> str:
        return f"{self.entity} {self.entity_id}: {self.field} is {self.stored!r}, expected {self.expected!r}"


class IntegrityChecker:
    """Compare maintained counters and references against the live records."""

    def __init__(self, store: CatalogStore):
        self.store = store

    def check(self) -> List[IntegrityIssue]:
        issues = []
        by_collection = {}
        for flyer in self.store.flyers.values():
            by_collection.setdefault(flyer.collection_id, []).append(flyer)

        for collection in self.store.collections.values():
            flyers = by_collection.get(collection.id, [])
            if collection.flyers_count != len(flyers):
                issues.append(IntegrityIssue(
                    'collection', collection.id, 'flyers_count', collection.flyers_count, len(flyers),
                ))
            flyer_ids = [flyer.id for flyer in flyers]
            thumbnail = collection.thumbnail_flyer_id
            if thumbnail is not None and thumbnail not in flyer_ids:
                issues.append(IntegrityIssue(
                    'collection', collection.id, 'thumbnail_flyer_id', thumbnail,
                    flyer_ids[0] if flyer_ids else None,
                ))
            elif thumbnail is None and flyer_ids:
                issues.append(IntegrityIssue(
                    'collection', collection.id, 'thumbnail_flyer_id', None, flyer_ids[0],
                ))
            for flyer in flyers:
                if flyer.store_id != collection.store_id:
                    issues.append(IntegrityIssue(
                        'flyer', flyer.id, 'store_id', flyer.store_id, collection.store_id,
                    ))

        for collection_id, flyers in by_collection.items():
            if collection_id not in self.store.collections:
                for flyer in flyers:
                    issues.append(IntegrityIssue('flyer', flyer.id, 'collection_id', collection_id, None))
        return issues

    def repair(self) -> List[IntegrityIssue]:
        """Fix every reported issue; flyers of missing collections are deleted."""
        issues = self.check()
        now = self.store.now()
        for issue in issues:
            if issue.entity == 'collection':
                record = self.store.collections[issue.entity_id]
                self.store.collections[issue.entity_id] = record.model_copy(
                    update={issue.field: issue.expected, 'updated_at': now}
                )
            elif issue.field == 'collection_id':
                self.store.flyers.pop(issue.entity_id, None)
            else:
                record = self.store.flyers[issue.entity_id]
                self.store.flyers[issue.entity_id] = record.model_copy(
                    update={issue.field: issue.expected, 'updated_at': now}
                )
        if issues:
            logger.warning("Repaired %d integrity issue(s)", len(issues))
        return issues
