"""Identifier utilities for catalog records."""

import uuid
from typing import Optional


# Namespace for seed record UUIDs (using DNS namespace as base)
SEED_RECORD_UUID_NAMESPACE = uuid.UUID('6ba7b811-9dad-11d1-80b4-00c04fd430c8')


def generate_entity_id() -> str:
    """Generate a fresh opaque identifier for a new record."""
    return str(uuid.uuid4())


def generate_seed_id(kind: str, name: str, owner: Optional[str] = None) -> str:
    """
    Generate a deterministic UUID for a seed record that ships without an id.

    This ensures that:
    - The same seed record always gets the same id across restarts
    - References written against a snapshot stay valid when it is reloaded

    Args:
        kind: Collection name the record belongs to (e.g. "stores")
        name: Record name (normalized: lowercase, whitespace stripped)
        owner: Id of the owning record for names that are only unique
            within their parent (a flyer's collection, a collection's store)

    Returns:
        String representation of UUID

    Example:
        >>> generate_seed_id("stores", "Albert Heijn") == generate_seed_id("stores", " albert heijn ")
        True
    """
    normalized_name = name.strip().lower()
    if owner:
        content = f"{kind}:{owner}:{normalized_name}"
    else:
        content = f"{kind}:{normalized_name}"
    return str(uuid.uuid5(SEED_RECORD_UUID_NAMESPACE, content))
