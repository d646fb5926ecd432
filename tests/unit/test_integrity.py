"""Tests for the collection counter and thumbnail checker."""

from deals.services.integrity import IntegrityIssue


def test_clean_catalog_has_no_issues(catalog, make_collection, make_flyer):
    collection = make_collection(name="Fall Catalog")
    make_flyer(collection.id, name="Sofa")

    assert catalog.checker.check() == []


def test_detects_and_repairs_drifted_counter(catalog, make_collection, make_flyer):
    collection = make_collection(name="Fall Catalog")
    make_flyer(collection.id, name="Sofa")
    store = catalog.store
    store.collections[collection.id] = store.collections[collection.id].model_copy(update={'flyers_count': 5})

    issues = catalog.checker.check()

    assert issues == [IntegrityIssue('collection', collection.id, 'flyers_count', 5, 1)]
    catalog.checker.repair()
    assert store.collections[collection.id].flyers_count == 1
    assert catalog.checker.check() == []


def test_detects_stale_thumbnail(catalog, make_collection, make_flyer):
    collection = make_collection(name="Fall Catalog")
    sofa = make_flyer(collection.id, name="Sofa")
    store = catalog.store
    store.collections[collection.id] = store.collections[collection.id].model_copy(
        update={'thumbnail_flyer_id': 'gone'}
    )

    (issue,) = catalog.checker.check()

    assert issue.field == 'thumbnail_flyer_id'
    assert issue.expected == sofa.id
    assert "thumbnail_flyer_id is 'gone'" in issue.describe()
    catalog.checker.repair()
    assert store.collections[collection.id].thumbnail_flyer_id == sofa.id


def test_detects_flyer_store_mismatch_and_orphans(catalog, make_collection, make_flyer):
    collection = make_collection(name="Fall Catalog")
    sofa = make_flyer(collection.id, name="Sofa")
    lamp = make_flyer(collection.id, name="Lamp")
    store = catalog.store
    store.flyers[sofa.id] = store.flyers[sofa.id].model_copy(update={'store_id': 'elsewhere'})
    store.flyers[lamp.id] = store.flyers[lamp.id].model_copy(update={'collection_id': 'gone'})

    fields = sorted(issue.field for issue in catalog.checker.check())

    assert fields == ['collection_id', 'flyers_count', 'store_id']
    catalog.checker.repair()
    assert lamp.id not in store.flyers
    assert store.flyers[sofa.id].store_id == collection.store_id
    assert catalog.checker.check() == []


def test_seed_snapshot_is_consistent(seeded_catalog):
    assert seeded_catalog.checker.check() == []
