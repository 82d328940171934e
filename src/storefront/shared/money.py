"""Monetary helpers.

Amounts are ``Decimal`` in the domain, quantized to cents, and persisted as
integer minor units so that sums never drift.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce ints, floats, strings and Decimals to a cent-quantized Decimal."""
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        # via str() so 0.1 stays 0.1 rather than its binary expansion
        amount = Decimal(str(value))
    else:
        amount = Decimal(value)
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal | None) -> int | None:
    if amount is None:
        return None
    return int((to_money(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def from_minor_units(cents: int | None) -> Decimal | None:
    if cents is None:
        return None
    return (Decimal(cents) / 100).quantize(CENT)
