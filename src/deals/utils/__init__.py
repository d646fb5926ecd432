"""Catalog utilities."""

from .clock import utc_now, as_utc
from .ids import generate_entity_id, generate_seed_id
from .pricing import final_price

__all__ = ['utc_now', 'as_utc', 'generate_entity_id', 'generate_seed_id', 'final_price']
