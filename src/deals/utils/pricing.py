"""Flyer pricing rule."""

from decimal import Decimal

HUNDRED = Decimal(100)


def final_price(price: Decimal, discount_percentage: Decimal) -> Decimal:
    """Return the price after applying a percentage discount.

    No rounding is applied here; callers format to two decimals for display.

    >>> final_price(Decimal("15.99"), Decimal("25"))
    Decimal('11.9925')
    """
    if discount_percentage > 0:
        return price - price * discount_percentage / HUNDRED
    return price


def format_percent(value: Decimal) -> str:
    """Render a discount percentage without trailing zeros (``30``, ``12.5``)."""
    return format(value.normalize(), 'f')
