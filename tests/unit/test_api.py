"""Tests for the response envelope and endpoint handlers."""

import pytest

from deals.api import failure, success
from deals.api.envelope import error_result
from deals.errors import ConflictError, NotFoundError, ValidationError


def test_success_envelope(api):
    result = api.create_category({'name': 'Furniture & Home', 'image': 'furniture.png'})

    assert result.http_status == 201
    body = result.to_dict()
    assert body['status'] == 0
    assert body['message'] == "Category created successfully"
    assert body['data']['name'] == 'Furniture & Home'
    assert body['data']['storesCount'] == 0
    assert 'createdAt' in body['data']


def test_failure_envelope_has_no_data(api):
    result = api.get_store('missing')

    assert result.http_status == 404
    assert result.to_dict() == {'status': 1, 'message': "Store not found"}


@pytest.mark.parametrize('exc, http_status', [
    (NotFoundError("Flyer not found"), 404),
    (ConflictError("Category name already exists"), 400),
    (ValidationError("End date must be after start date"), 400),
])
def test_domain_errors_map_to_status_codes(exc, http_status):
    result = error_result(exc)

    assert result.http_status == http_status
    assert result.body.message == str(exc)


def test_unexpected_error_is_internal(api, monkeypatch, caplog):
    def boom():
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(api.catalog, 'overview', boom)

    result = api.overview()

    assert result.http_status == 500
    assert result.to_dict() == {'status': 1, 'message': "Internal server error"}
    assert "disk on fire" in caplog.text


def test_payload_validation_is_bad_request(api):
    result = api.create_category({'name': 'X'})

    assert result.http_status == 400
    assert result.body.status == 1
    assert result.body.message.startswith("name:")


def test_flyer_window_error_message(api):
    store = api.create_store({'name': 'IKEA', 'categoryId': 'cat-5'}).to_dict()['data']
    collection = api.create_collection({'name': 'Fall Catalog', 'storeId': store['id']}).to_dict()['data']

    result = api.create_flyer(collection['id'], {
        'name': 'Sofa',
        'price': 499,
        'startDate': '2024-08-24T00:00:00Z',
        'endDate': '2024-08-10T00:00:00Z',
    })

    assert result.http_status == 400
    assert "End date must be after start date" in result.body.message


def test_category_delete_guard_message(api):
    category = api.create_category({'name': 'Furniture'}).to_dict()['data']
    api.create_store({'name': 'IKEA', 'categoryId': category['id']})

    result = api.delete_category(category['id'])

    assert result.http_status == 400
    assert result.body.message == "Cannot delete category. 1 store(s) are using this category."


def test_list_envelope_and_clamped_limit(api):
    for name in ("Groceries", "Fashion", "Electronics"):
        api.create_category({'name': name})

    body = api.list_categories({'page': '1', 'limit': '500'}).to_dict()

    assert set(body['data']) == {'list', 'total', 'page', 'limit', 'totalPages'}
    assert body['data']['limit'] == 100
    assert body['data']['total'] == 3
    assert body['data']['totalPages'] == 1


def test_unparsable_pagination_falls_back_to_defaults(api):
    body = api.list_stores({'page': 'abc', 'limit': ''}).to_dict()

    assert body['data']['page'] == 1
    assert body['data']['limit'] == 10


def test_users_default_page_size(api):
    assert api.list_users().to_dict()['data']['limit'] == 20


def test_store_category_filter_accepts_both_names(api):
    first = api.create_category({'name': 'Furniture'}).to_dict()['data']
    second = api.create_category({'name': 'Fashion'}).to_dict()['data']
    api.create_store({'name': 'IKEA', 'categoryId': first['id']})
    api.create_store({'name': 'Zara', 'categoryId': second['id']})

    by_category = api.list_stores({'category': first['id']}).to_dict()['data']['list']
    by_category_id = api.list_stores({'categoryId': second['id']}).to_dict()['data']['list']

    assert [s['name'] for s in by_category] == ['IKEA']
    assert [s['name'] for s in by_category_id] == ['Zara']


def test_invalid_status_filter_is_bad_request(api):
    assert api.list_stores({'status': 'open'}).http_status == 400


def test_notification_actions(api):
    created = api.create_notification({
        'title': 'Holiday hours',
        'message': 'Check opening hours',
        'target': {'type': 'all_users'},
        'scheduledFor': '2030-01-01T09:00:00Z',
    }).to_dict()['data']

    assert created['status'] == 'scheduled'
    sent = api.send_notification(created['id'])
    assert sent.body.message == "Notification sent successfully"
    assert sent.to_dict()['data']['status'] == 'sent'

    again = api.cancel_notification(created['id'])
    assert again.http_status == 400
    assert again.body.message == "Can only cancel scheduled notifications"


def test_cancel_action_message(api):
    created = api.create_notification({
        'title': 'Holiday hours',
        'message': 'Check opening hours',
        'target': {'type': 'all_users'},
        'scheduledFor': '2030-01-01T09:00:00Z',
    }).to_dict()['data']

    result = api.cancel_notification(created['id'])

    assert result.body.message == "Notification cancelled successfully"
    assert result.to_dict()['data']['status'] == 'cancelled'


def test_flyer_prices_serialize_as_numbers(api):
    store = api.create_store({'name': 'IKEA', 'categoryId': 'cat-5'}).to_dict()['data']
    collection = api.create_collection({'name': 'Fall Catalog', 'storeId': store['id']}).to_dict()['data']

    flyer = api.create_flyer(collection['id'], {
        'name': 'Sofa',
        'price': '15.99',
        'discountPercentage': '25',
        'startDate': '2025-09-01T00:00:00Z',
        'endDate': '2025-12-01T00:00:00Z',
    }).to_dict()['data']

    assert flyer['price'] == 15.99
    assert flyer['discountPercentage'] == 25
    assert flyer['finalPrice'] == 11.9925
    assert isinstance(flyer['finalPrice'], float)
    assert flyer['isActive'] is True
    assert flyer['storeName'] == 'IKEA'


def test_helpers():
    assert success({'a': 1}).to_dict() == {'status': 0, 'message': 'Success', 'data': {'a': 1}}
    assert failure("Nope", 404).http_status == 404
