"""JSON snapshot processing utilities."""

import json
import logging
import os
from decimal import Decimal
from importlib import resources
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..database import CatalogStore
from ..errors import ValidationError, from_pydantic
from ..models import AppUser, Category, Collection, Flyer, Notification, Store
from .ids import generate_seed_id
from .pricing import final_price

logger = logging.getLogger(__name__)

BUNDLED_SEED = 'seed.json'

# Table name -> (record model, field used to derive a seed id, owning reference
# that scopes the seed id when names only repeat across parents)
SNAPSHOT_TABLES = {
    'categories': (Category, 'name', None),
    'stores': (Store, 'name', None),
    'collections': (Collection, 'name', 'storeId'),
    'flyers': (Flyer, 'name', 'collectionId'),
    'users': (AppUser, 'email', None),
    'notifications': (Notification, 'title', None),
}


class JSONProcessor:
    """JSON processor for catalog snapshots.

    A snapshot is one JSON object with a list of camelCase records per table
    (``categories``, ``stores``, ``collections``, ``flyers``, ``users``,
    ``notifications``). Missing tables are treated as empty.
    """

    def load_snapshot(self, json_file_path: Optional[str] = None) -> Dict[str, Any]:
        """Load a snapshot from a JSON file, or the bundled seed when no path is given."""
        if json_file_path is None:
            content = resources.files('deals.data').joinpath(BUNDLED_SEED).read_text(encoding='utf-8')
            return json.loads(content, parse_float=Decimal)

        if not os.path.exists(json_file_path):
            raise FileNotFoundError(f"JSON file not found: {json_file_path}")
        with open(json_file_path, 'r', encoding='utf-8') as file:
            data = json.load(file, parse_float=Decimal)
        if not isinstance(data, dict):
            raise ValidationError(f"Snapshot must be a JSON object: {json_file_path}")
        return data

    def build_store(self, snapshot: Dict[str, Any], store: Optional[CatalogStore] = None) -> CatalogStore:
        """Validate every snapshot record and insert it into a store.

        Records without an ``id`` get a deterministic seed id; records without
        timestamps are stamped with the store's clock. Flyer final prices are
        always recomputed from price and discount.
        """
        store = store if store is not None else CatalogStore()
        now = store.now()
        for table, (model, name_field, owner_field) in SNAPSHOT_TABLES.items():
            target = store.table(table)
            for position, raw in enumerate(snapshot.get(table) or []):
                record = self._parse_record(table, position, model, name_field, owner_field, raw, now)
                if record.id in target:
                    raise ValidationError(f"{table}[{position}]: duplicate id {record.id}")
                target[record.id] = record

        for flyer_id, flyer in store.flyers.items():
            store.flyers[flyer_id] = flyer.model_copy(
                update={'final_price': final_price(flyer.price, flyer.discount_percentage)}
            )
        logger.info("Loaded snapshot: %s", store.counts())
        return store

    def load_store(self, json_file_path: Optional[str] = None, store: Optional[CatalogStore] = None) -> CatalogStore:
        return self.build_store(self.load_snapshot(json_file_path), store)

    def dump_snapshot(self, store: CatalogStore) -> Dict[str, List[Dict[str, Any]]]:
        """Serialize every table in insertion order."""
        return {
            table: [record.to_api() for record in store.table(table).values()]
            for table in SNAPSHOT_TABLES
        }

    def save_store(self, store: CatalogStore, json_file_path: str) -> str:
        """Write the store to a JSON snapshot file.

        Returns:
            Path to the saved JSON file
        """
        output_dir = os.path.dirname(json_file_path)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        with open(json_file_path, 'w', encoding='utf-8') as file:
            json.dump(self.dump_snapshot(store), file, indent=2, ensure_ascii=False)
        logger.info("Saved snapshot to %s", json_file_path)
        return json_file_path

    def validate_snapshot(self, json_file_path: str) -> List[str]:
        """Return the problems found in a snapshot file; empty when it loads cleanly."""
        try:
            self.load_store(json_file_path)
        except (ValidationError, FileNotFoundError, json.JSONDecodeError) as e:
            return [str(e)]
        return []

    @staticmethod
    def _parse_record(
        table: str,
        position: int,
        model: type,
        name_field: str,
        owner_field: Optional[str],
        raw: Dict[str, Any],
        now,
    ) -> BaseModel:
        if not isinstance(raw, dict):
            raise ValidationError(f"{table}[{position}]: record must be an object")
        data = dict(raw)
        if not data.get('id'):
            owner = data.get(owner_field) if owner_field else None
            data['id'] = generate_seed_id(table, str(data.get(name_field, position)), owner)
        data.setdefault('createdAt', now)
        data.setdefault('updatedAt', data['createdAt'])
        if model is Flyer:
            # Derived on load; any stored value is ignored
            data.setdefault('finalPrice', data.get('price', 0))
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"{table}[{position}]: {from_pydantic(e)}") from e
