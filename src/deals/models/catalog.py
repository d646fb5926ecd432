"""Catalog data models: categories, stores, collections and flyers."""

import re
from decimal import Decimal
from typing import Annotated, ClassVar, FrozenSet, Optional

from pydantic import Field, PlainSerializer, field_validator, model_validator

from .base import CatalogModel, Entity, Payload, UpdatePayload, UtcDatetime
from .enums import BasicStatus

_HOURS_PATTERN = re.compile(r'^([01]?[0-9]|2[0-3]):([0-5][0-9])-([01]?[0-9]|2[0-3]):([0-5][0-9])$')

CLOSED = "Closed"

# Exact inside the engine, plain numbers on the wire
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used='json')]


def validate_hours_entry(value: str) -> str:
    """Accept "Closed" (any case) or an ``HH:MM-HH:MM`` range with start before end."""
    trimmed = value.strip()
    if trimmed.lower() == CLOSED.lower():
        return CLOSED
    match = _HOURS_PATTERN.match(trimmed)
    if not match:
        raise ValueError("Enter 'Closed' or a time range such as '09:00-18:00'")
    start_h, start_m, end_h, end_m = (int(part) for part in match.groups())
    if start_h * 60 + start_m >= end_h * 60 + end_m:
        raise ValueError("Opening time must be before closing time")
    return trimmed


# Category


class Category(Entity):
    """Category model."""

    name: str
    image: str = ""
    status: BasicStatus = BasicStatus.ENABLE


class CategoryView(Category):
    """Category with its live store count."""

    stores_count: int = 0


class CategoryCreate(Payload):
    name: str = Field(min_length=2, max_length=100)
    image: str = ""
    status: BasicStatus = BasicStatus.ENABLE


class CategoryUpdate(UpdatePayload):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    image: Optional[str] = None
    status: Optional[BasicStatus] = None


# Store


class Coordinates(CatalogModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class StoreLocation(CatalogModel):
    """Store location model."""

    address: str = ""
    city: str = ""
    postcode: str = ""
    country: str = ""
    coordinates: Optional[Coordinates] = None


class OpeningHours(CatalogModel):
    """Weekly opening hours, one free-text entry per weekday."""

    monday: str = CLOSED
    tuesday: str = CLOSED
    wednesday: str = CLOSED
    thursday: str = CLOSED
    friday: str = CLOSED
    saturday: str = CLOSED
    sunday: str = CLOSED

    @field_validator('*')
    @classmethod
    def _check_entry(cls, value: str) -> str:
        return validate_hours_entry(value)


class Store(Entity):
    """Store model."""

    name: str
    category_id: str
    logo: str = ""
    location: StoreLocation = Field(default_factory=StoreLocation)
    opening_hours: OpeningHours = Field(default_factory=OpeningHours)
    website: Optional[str] = None
    description: Optional[str] = None
    status: BasicStatus = BasicStatus.ENABLE


class StoreView(Store):
    """Store joined with its category name and live flyer count."""

    category_name: str
    active_flyers_count: int = 0


class StoreCreate(Payload):
    name: str = Field(min_length=2, max_length=100)
    category_id: str = Field(min_length=1)
    logo: str = ""
    location: StoreLocation = Field(default_factory=StoreLocation)
    opening_hours: OpeningHours = Field(default_factory=OpeningHours)
    website: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=500)
    status: BasicStatus = BasicStatus.ENABLE


class StoreUpdate(UpdatePayload):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"website", "description"})

    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    category_id: Optional[str] = Field(default=None, min_length=1)
    logo: Optional[str] = None
    location: Optional[StoreLocation] = None
    opening_hours: Optional[OpeningHours] = None
    website: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=500)
    status: Optional[BasicStatus] = None


# Collection


class Collection(Entity):
    """Collection model.

    ``flyers_count`` and ``thumbnail_flyer_id`` are maintained by the
    integrity rules on every flyer create and delete.
    """

    name: str
    store_id: str
    category_id: Optional[str] = None
    thumbnail_flyer_id: Optional[str] = None
    flyers_count: int = 0
    status: BasicStatus = BasicStatus.ENABLE


class CollectionView(Collection):
    store_name: str
    active_flyers: int = 0
    thumbnail_image: Optional[str] = None


class CollectionCreate(Payload):
    name: str = Field(min_length=2, max_length=100)
    store_id: str = Field(min_length=1)
    category_id: Optional[str] = None
    status: BasicStatus = BasicStatus.ENABLE


class CollectionUpdate(UpdatePayload):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"category_id", "thumbnail_flyer_id"})

    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    store_id: Optional[str] = Field(default=None, min_length=1)
    category_id: Optional[str] = None
    thumbnail_flyer_id: Optional[str] = None
    status: Optional[BasicStatus] = None


# Flyer


class Flyer(Entity):
    """Flyer model.

    ``store_id`` is a copy of the owning collection's store, kept for filtering.
    """

    name: str
    image: str = ""
    price: Amount
    discount_percentage: Amount = Decimal(0)
    final_price: Amount
    collection_id: str
    store_id: str
    start_date: UtcDatetime
    end_date: UtcDatetime
    status: BasicStatus = BasicStatus.ENABLE


class FlyerView(Flyer):
    is_active: bool = False
    store_name: Optional[str] = None
    collection_name: Optional[str] = None


class FlyerCreate(Payload):
    name: str = Field(min_length=2, max_length=100)
    image: str = ""
    price: Decimal = Field(gt=0, le=Decimal("999999.99"))
    discount_percentage: Decimal = Field(default=Decimal(0), ge=0, le=100)
    start_date: UtcDatetime
    end_date: UtcDatetime
    status: BasicStatus = BasicStatus.ENABLE

    @model_validator(mode='after')
    def _check_window(self) -> 'FlyerCreate':
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class FlyerUpdate(UpdatePayload):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    image: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0, le=Decimal("999999.99"))
    discount_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None
    status: Optional[BasicStatus] = None
