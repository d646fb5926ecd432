"""Listing models: pagination parameters, result pages and filters."""

from typing import Any, Callable, Generic, List, Optional, TypeVar

from pydantic import Field, field_validator

from .base import CatalogModel, UtcDatetime
from .enums import (
    BasicStatus,
    NotificationStatus,
    NotificationTargetType,
    NotificationType,
    UserStatus,
)

T = TypeVar('T')


class PageParams(CatalogModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Page(CatalogModel, Generic[T]):
    """One page of a filtered, sorted listing."""

    items: List[T] = Field(alias='list')
    total: int
    page: int
    limit: int
    total_pages: int

    def map(self, func: Callable[[T], Any]) -> 'Page':
        """Return the same page with every item transformed."""
        return Page(
            items=[func(item) for item in self.items],
            total=self.total,
            page=self.page,
            limit=self.limit,
            total_pages=self.total_pages,
        )


class ListFilters(CatalogModel):
    """Common listing filters. Numeric status codes arrive as strings from query params."""

    search: Optional[str] = None

    @field_validator('status', mode='before', check_fields=False)
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lstrip('-').isdigit():
            return int(value)
        if value == "":
            return None
        return value


class CategoryFilters(ListFilters):
    status: Optional[BasicStatus] = None


class StoreFilters(ListFilters):
    category_id: Optional[str] = None
    status: Optional[BasicStatus] = None
    city: Optional[str] = None


class CollectionFilters(ListFilters):
    store_id: Optional[str] = None
    status: Optional[BasicStatus] = None
    active_only: bool = False


class FlyerFilters(ListFilters):
    collection_id: Optional[str] = None
    store_id: Optional[str] = None
    status: Optional[BasicStatus] = None
    active_only: bool = False


class UserFilters(ListFilters):
    status: Optional[UserStatus] = None
    language: Optional[str] = None
    city: Optional[str] = None


class NotificationFilters(ListFilters):
    type: Optional[NotificationType] = None
    status: Optional[NotificationStatus] = None
    target_type: Optional[NotificationTargetType] = None
    date_from: Optional[UtcDatetime] = None
    date_to: Optional[UtcDatetime] = None
