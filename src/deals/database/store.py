"""In-memory catalog storage."""

import logging
from datetime import datetime
from typing import Callable, Dict, Optional

from ..models import AppUser, Category, Collection, Flyer, Notification, Store
from ..utils.clock import Clock, utc_now
from ..utils.ids import generate_entity_id

logger = logging.getLogger(__name__)


class CatalogStore:
    """Authoritative in-memory collections, one dict per entity type keyed by id.

    A store is constructed once per process (or once per test) and handed to
    every service that needs it. Records are replaced, never mutated in place,
    so a returned record is a snapshot of the state at the time of the call.
    """

    TABLES = ('categories', 'stores', 'collections', 'flyers', 'users', 'notifications')

    def __init__(
        self,
        clock: Optional[Clock] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.categories: Dict[str, Category] = {}
        self.stores: Dict[str, Store] = {}
        self.collections: Dict[str, Collection] = {}
        self.flyers: Dict[str, Flyer] = {}
        self.users: Dict[str, AppUser] = {}
        self.notifications: Dict[str, Notification] = {}
        self._clock = clock or utc_now
        self._id_factory = id_factory or generate_entity_id

    def now(self) -> datetime:
        """Current time according to the store's clock."""
        return self._clock()

    def new_id(self, table: str) -> str:
        """Return an identifier not yet used in ``table``."""
        records = self.table(table)
        while True:
            candidate = self._id_factory()
            if candidate not in records:
                return candidate

    def table(self, name: str) -> Dict:
        if name not in self.TABLES:
            raise KeyError(f"Unknown table '{name}'")
        return getattr(self, name)

    def counts(self) -> Dict[str, int]:
        """Record count per table."""
        return {name: len(self.table(name)) for name in self.TABLES}

    def clear(self) -> None:
        for name in self.TABLES:
            self.table(name).clear()
        logger.debug("Catalog store cleared")
