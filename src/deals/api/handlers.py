"""Request handlers: one method per dashboard endpoint.

Handlers take the raw query-string and body dicts the transport hands over,
call the matching service and wrap the outcome in the response envelope.
They never raise.
"""

import logging
from typing import Any, Callable, Dict, Optional

from ..models import (
    AppUserCreate,
    AppUserUpdate,
    CategoryCreate,
    CategoryFilters,
    CategoryUpdate,
    CollectionCreate,
    CollectionFilters,
    CollectionUpdate,
    FlyerCreate,
    FlyerFilters,
    FlyerUpdate,
    NotificationCreate,
    NotificationFilters,
    NotificationUpdate,
    PageParams,
    StoreCreate,
    StoreFilters,
    StoreUpdate,
    UserFilters,
)
from ..services import Catalog
from .envelope import HTTP_CREATED, HTTP_OK, ApiResult, error_result, success

logger = logging.getLogger(__name__)

Query = Optional[Dict[str, Any]]
Body = Optional[Dict[str, Any]]

TRUE_VALUES = {'1', 'true', 'yes', 'on'}


def _int_param(query: Dict[str, Any], key: str) -> Optional[int]:
    """Read an integer query parameter; anything unparsable counts as absent."""
    value = query.get(key)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _bool_param(query: Dict[str, Any], key: str) -> bool:
    value = query.get(key)
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES if value is not None else False


def _pick(query: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    """Copy the non-empty query values for ``keys``."""
    return {key: query[key] for key in keys if query.get(key) not in (None, "")}


class CatalogApi:
    """Dashboard endpoints over a :class:`Catalog`."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def _handle(
        self,
        action: Callable[[], Any],
        message: str = "Success",
        http_status: int = HTTP_OK,
    ) -> ApiResult:
        try:
            data = action()
        except Exception as e:
            return error_result(e)
        return success(data, message, http_status)

    def _page(self, query: Dict[str, Any], default_limit: Optional[int] = None) -> PageParams:
        return self.catalog.query.page_params(
            _int_param(query, 'page'), _int_param(query, 'limit'), default_limit
        )

    # Categories

    def list_categories(self, query: Query = None) -> ApiResult:
        query = query or {}
        return self._handle(lambda: self.catalog.categories.list(
            CategoryFilters.model_validate(_pick(query, 'search', 'status')),
            self._page(query),
        ))

    def get_category(self, category_id: str) -> ApiResult:
        return self._handle(lambda: self.catalog.categories.get_by_id(category_id))

    def create_category(self, body: Body) -> ApiResult:
        return self._handle(
            lambda: self.catalog.categories.create(CategoryCreate.model_validate(body or {})),
            "Category created successfully",
            HTTP_CREATED,
        )

    def update_category(self, category_id: str, body: Body) -> ApiResult:
        return self._handle(
            lambda: self.catalog.categories.update(category_id, CategoryUpdate.model_validate(body or {})),
            "Category updated successfully",
        )

    def delete_category(self, category_id: str) -> ApiResult:
        return self._handle(
            lambda: self.catalog.categories.delete(category_id),
            "Category deleted successfully",
        )

    # Stores

    def list_stores(self, query: Query = None) -> ApiResult:
        query = query or {}

        def action():
            filters = _pick(query, 'search', 'status', 'city')
            # The dashboard sends either name for the category filter
            category_id = query.get('categoryId') or query.get('category')
            if category_id:
                filters['categoryId'] = category_id
            return self.catalog.stores.list(StoreFilters.model_validate(filters), self._page(query))

        return self._handle(action)

    def get_store(self, store_id: str) -> ApiResult:
        return self._handle(lambda: self.catalog.stores.get_by_id(store_id))

    def create_store(self, body: Body) -> ApiResult:
        return self._handle(
            lambda: self.catalog.stores.create(StoreCreate.model_validate(body or {})).record,
            "Store created successfully",
            HTTP_CREATED,
        )

    def update_store(self, store_id: str, body: Body) -> ApiResult:
        return self._handle(
            lambda: self.catalog.stores.update(store_id, StoreUpdate.model_validate(body or {})),
            "Store updated successfully",
        )

    def delete_store(self, store_id: str) -> ApiResult:
        return self._handle(
            lambda: {'removedCollections': self.catalog.stores.delete(store_id)},
            "Store deleted successfully",
        )

    # Collections

    def list_collections(self, query: Query = None) -> ApiResult:
        query = query or {}

        def action():
            filters = _pick(query, 'search', 'status', 'storeId')
            filters['activeOnly'] = _bool_param(query, 'activeOnly')
            return self.catalog.collections.list(
                CollectionFilters.model_validate(filters), self._page(query)
            )

        return self._handle(action)

    def get_collection(self, collection_id: str) -> ApiResult:
        return self._handle(lambda: self.catalog.collections.get_by_id(collection_id))

    def create_collection(self, body: Body) -> ApiResult:
        return self._handle(
            lambda: self.catalog.collections.create(CollectionCreate.model_validate(body or {})).record,
            "Collection created successfully",
            HTTP_CREATED,
        )

    def update_collection(self, collection_id: str, body: Body) -> ApiResult:
        return self._handle(
            lambda: self.catalog.collections.update(
                collection_id, CollectionUpdate.model_validate(body or {})
            ),
            "Collection updated successfully",
        )

    def set_collection_thumbnail(self, collection_id: str, body: Body) -> ApiResult:
        flyer_id = (body or {}).get('flyerId', "")
        return self._handle(
            lambda: self.catalog.collections.set_thumbnail(collection_id, flyer_id),
            "Thumbnail updated successfully",
        )

    def delete_collection(self, collection_id: str) -> ApiResult:
        return self._handle(
            lambda: {'removedFlyers': self.catalog.collections.delete(collection_id)},
            "Collection deleted successfully",
        )

    # Flyers

    def list_collection_flyers(self, collection_id: str, query: Query = None) -> ApiResult:
        query = query or {}
        return self._handle(lambda: self.catalog.flyers.list_for_collection(
            collection_id, _bool_param(query, 'activeOnly'), self._page(query)
        ))

    def list_flyers(self, query: Query = None) -> ApiResult:
        query = query or {}

        def action():
            filters = _pick(query, 'search', 'status', 'storeId', 'collectionId')
            filters['activeOnly'] = _bool_param(query, 'activeOnly')
            return self.catalog.flyers.list(FlyerFilters.model_validate(filters), self._page(query))

        return self._handle(action)

    def get_flyer(self, flyer_id: str) -> ApiResult:
        return self._handle(lambda: self.catalog.flyers.get_by_id(flyer_id))

    def create_flyer(self, collection_id: str, body: Body) -> ApiResult:
        return self._handle(
            lambda: self.catalog.flyers.create(collection_id, FlyerCreate.model_validate(body or {})).record,
            "Flyer created successfully",
            HTTP_CREATED,
        )

    def update_flyer(self, collection_id: str, flyer_id: str, body: Body) -> ApiResult:
        return self._handle(
            lambda: self.catalog.flyers.update(
                collection_id, flyer_id, FlyerUpdate.model_validate(body or {})
            ).record,
            "Flyer updated successfully",
        )

    def delete_flyer(self, collection_id: str, flyer_id: str) -> ApiResult:
        return self._handle(
            lambda: self.catalog.flyers.delete(collection_id, flyer_id),
            "Flyer deleted successfully",
        )

    # App users

    def list_users(self, query: Query = None) -> ApiResult:
        query = query or {}
        return self._handle(lambda: self.catalog.users.list(
            UserFilters.model_validate(_pick(query, 'search', 'status', 'language', 'city')),
            self._page(query, self.catalog.config.user_page_size),
        ))

    def get_user(self, user_id: str) -> ApiResult:
        return self._handle(lambda: self.catalog.users.get_by_id(user_id))

    def create_user(self, body: Body) -> ApiResult:
        return self._handle(
            lambda: self.catalog.users.create(AppUserCreate.model_validate(body or {})),
            "User created successfully",
            HTTP_CREATED,
        )

    def update_user(self, user_id: str, body: Body) -> ApiResult:
        return self._handle(
            lambda: self.catalog.users.update(user_id, AppUserUpdate.model_validate(body or {})),
            "User updated successfully",
        )

    def delete_user(self, user_id: str) -> ApiResult:
        return self._handle(lambda: self.catalog.users.delete(user_id), "User deleted successfully")

    def suspend_user(self, user_id: str) -> ApiResult:
        return self._handle(lambda: self.catalog.users.suspend(user_id), "User suspended successfully")

    def activate_user(self, user_id: str) -> ApiResult:
        return self._handle(lambda: self.catalog.users.activate(user_id), "User activated successfully")

    def user_stats(self) -> ApiResult:
        return self._handle(self.catalog.users.stats)

    # Notifications

    def list_notifications(self, query: Query = None) -> ApiResult:
        query = query or {}
        return self._handle(lambda: self.catalog.notifications.list(
            NotificationFilters.model_validate(
                _pick(query, 'search', 'type', 'status', 'targetType', 'dateFrom', 'dateTo')
            ),
            self._page(query),
        ))

    def get_notification(self, notification_id: str) -> ApiResult:
        return self._handle(lambda: self.catalog.notifications.get(notification_id))

    def create_notification(self, body: Body, created_by: Optional[str] = None) -> ApiResult:
        return self._handle(
            lambda: self.catalog.notifications.create(
                NotificationCreate.model_validate(body or {}), created_by
            ),
            "Notification created successfully",
            HTTP_CREATED,
        )

    def update_notification(self, notification_id: str, body: Body) -> ApiResult:
        return self._handle(
            lambda: self.catalog.notifications.update(
                notification_id, NotificationUpdate.model_validate(body or {})
            ),
            "Notification updated successfully",
        )

    def delete_notification(self, notification_id: str) -> ApiResult:
        return self._handle(
            lambda: self.catalog.notifications.delete(notification_id),
            "Notification deleted successfully",
        )

    def cancel_notification(self, notification_id: str) -> ApiResult:
        return self._handle(
            lambda: self.catalog.notifications.cancel(notification_id),
            "Notification cancelled successfully",
        )

    def send_notification(self, notification_id: str) -> ApiResult:
        return self._handle(
            lambda: self.catalog.notifications.send_now(notification_id),
            "Notification sent successfully",
        )

    def dispatch_due_notifications(self) -> ApiResult:
        return self._handle(self.catalog.notifications.dispatch_due)

    def notification_stats(self) -> ApiResult:
        return self._handle(self.catalog.notifications.stats)

    # Dashboard

    def overview(self) -> ApiResult:
        return self._handle(self.catalog.overview)

    def check_integrity(self, repair: bool = False) -> ApiResult:
        def action():
            checker = self.catalog.checker
            issues = checker.repair() if repair else checker.check()
            return {'repaired': repair, 'issues': [issue.describe() for issue in issues]}

        return self._handle(action)
