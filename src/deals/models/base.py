"""Base model configuration shared by all catalog records."""

from datetime import datetime
from typing import Annotated, Any, ClassVar, Dict, FrozenSet

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..utils.clock import as_utc

# Naive datetimes from payloads or snapshots are read as UTC
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class CatalogModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_api(self) -> dict:
        """Dump the model the way the dashboard reads it."""
        return self.model_dump(by_alias=True, mode='json')


class Entity(CatalogModel):
    """Fields carried by every stored record."""

    id: str
    created_at: UtcDatetime
    updated_at: UtcDatetime


class Payload(CatalogModel):
    """Incoming create or update body; text is trimmed before length checks."""

    model_config = ConfigDict(str_strip_whitespace=True)


class UpdatePayload(Payload):
    """Partial update; only fields the caller actually sent are applied."""

    # Fields that may be cleared by sending an explicit null
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    def changes(self) -> Dict[str, Any]:
        """Return the shallow-merge dict for the fields that were set."""
        result = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None and name not in self.nullable_fields:
                continue
            result[name] = value
        return result
