"""Tests for identifier utilities."""

from deals.database import CatalogStore
from deals.utils.ids import generate_entity_id, generate_seed_id


def test_generate_seed_id_is_deterministic():
    """Same kind and name always give the same id."""
    first = generate_seed_id("stores", "Albert Heijn")
    second = generate_seed_id("stores", "Albert Heijn")

    # Should be a valid UUID string
    assert isinstance(first, str)
    assert len(first) == 36
    assert first.count('-') == 4
    assert first == second


def test_generate_seed_id_normalizes_name():
    assert generate_seed_id("stores", "Albert Heijn") == generate_seed_id("stores", "  albert heijn ")


def test_generate_seed_id_differs_per_kind():
    assert generate_seed_id("stores", "Fashion") != generate_seed_id("categories", "Fashion")


def test_generate_seed_id_differs_per_owner():
    assert generate_seed_id("flyers", "Bananas", "col-1") != generate_seed_id("flyers", "Bananas", "col-2")
    assert generate_seed_id("flyers", "Bananas", "col-1") != generate_seed_id("flyers", "Bananas")


def test_generate_entity_id_is_unique():
    assert generate_entity_id() != generate_entity_id()


def test_store_new_id_skips_taken_ids(clock):
    ids = iter(['a', 'a', 'b'])
    store = CatalogStore(clock=clock, id_factory=lambda: next(ids))
    store.categories['a'] = object()

    assert store.new_id('categories') == 'b'
