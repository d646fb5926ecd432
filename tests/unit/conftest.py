"""Shared fixtures for catalog tests."""

import itertools
import random
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

# Add src to path
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))

from deals.api import CatalogApi
from deals.config import CatalogConfig
from deals.database import CatalogStore
from deals.models import (
    CategoryCreate,
    CollectionCreate,
    FlyerCreate,
    StoreCreate,
)
from deals.services import Catalog
from deals.utils.json_processor import JSONProcessor

NOW = datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc)
FOLLOWERS = 120


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def config():
    config = CatalogConfig()
    config.default_page_size = 10
    config.user_page_size = 20
    config.max_page_size = 100
    config.auto_read_rate = 0.6
    config.manual_read_rate = 0.7
    # Equal bounds make the follower estimate deterministic
    config.follower_estimate_min = FOLLOWERS
    config.follower_estimate_max = FOLLOWERS
    config.admin_id = 'admin-1'
    return config


@pytest.fixture
def store(clock):
    counter = itertools.count(1)
    return CatalogStore(clock=clock, id_factory=lambda: f"id-{next(counter)}")


@pytest.fixture
def catalog(store, config):
    return Catalog(store, config, rng=random.Random(7))


@pytest.fixture
def seeded_catalog(store, config):
    JSONProcessor().load_store(store=store)
    return Catalog(store, config, rng=random.Random(7))


@pytest.fixture
def api(catalog):
    return CatalogApi(catalog)


@pytest.fixture
def make_category(catalog):
    def make(name="Groceries", **kwargs):
        return catalog.categories.create(CategoryCreate(name=name, **kwargs))
    return make


@pytest.fixture
def make_store(catalog, make_category):
    def make(name="Albert Heijn", category_id=None, **kwargs):
        if category_id is None:
            category_id = make_category(name=f"{name} category").id
        return catalog.stores.create(StoreCreate(name=name, category_id=category_id, **kwargs)).record
    return make


@pytest.fixture
def make_collection(catalog, make_store):
    def make(name="Weekly Deals", store_id=None, **kwargs):
        if store_id is None:
            store_id = make_store(name=f"{name} store").id
        return catalog.collections.create(CollectionCreate(name=name, store_id=store_id, **kwargs)).record
    return make


@pytest.fixture
def make_flyer(catalog, clock):
    def make(collection_id, name="Bananas", price="2.00", discount="0", start=None, end=None, **kwargs):
        payload = FlyerCreate(
            name=name,
            price=Decimal(price),
            discount_percentage=Decimal(discount),
            start_date=start or clock.now - timedelta(days=1),
            end_date=end or clock.now + timedelta(days=7),
            **kwargs,
        )
        return catalog.flyers.create(collection_id, payload).record
    return make
