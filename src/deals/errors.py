"""Shared catalog error types and error messages."""

from pydantic import ValidationError as PydanticValidationError


class DomainError(ValueError):
    """Base class for catalog errors.

    Subclasses provide semantic categories that the API boundary maps to
    HTTP-like status codes.
    """


class ValidationError(DomainError):
    """Malformed payload or a value outside its allowed range."""


class NotFoundError(DomainError):
    """Operation on an identifier that does not exist."""


class ConflictError(DomainError):
    """Uniqueness violation, blocked deletion or illegal state transition."""


class CategoryInUseError(ConflictError):
    """Category deletion blocked by stores that still reference it."""

    def __init__(self, category_id: str, stores_count: int):
        self.category_id = category_id
        self.stores_count = stores_count
        super().__init__(category_in_use(stores_count))


def not_found(entity: str) -> str:
    """Return message for a missing entity, e.g. ``Store not found``."""
    return f"{entity} not found"


def name_already_exists(entity: str) -> str:
    """Return message for a duplicate entity name."""
    return f"{entity} name already exists"


def category_in_use(stores_count: int) -> str:
    """Return message when stores still reference a category."""
    return f"Cannot delete category. {stores_count} store(s) are using this category."


def notification_not_editable(action: str) -> str:
    """Return message for edits on a sent or cancelled notification."""
    return f"Cannot {action} notification that has already been sent or cancelled"


def from_pydantic(exc: PydanticValidationError) -> ValidationError:
    """Convert a pydantic validation failure into a catalog ValidationError."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "__root__")
        message = error.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators
        message = message.removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return ValidationError("; ".join(parts) or "Invalid payload")
