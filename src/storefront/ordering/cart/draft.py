"""Checkout draft: the priced, unpersisted order handed to order creation."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from storefront.ordering.cart.cart import Cart
from storefront.shared.money import ZERO, to_money

TAX_RATE = Decimal("0.15")
FREE_SHIPPING_THRESHOLD = Decimal("100")
SHIPPING_FEE = Decimal("10")


def shipping_for(items_price: Decimal) -> Decimal:
    """Free strictly above the threshold, a flat fee otherwise."""
    return ZERO if items_price > FREE_SHIPPING_THRESHOLD else to_money(SHIPPING_FEE)


@dataclass(frozen=True)
class DraftItem:
    product_id: str
    name: str
    image: str
    unit_price: Decimal
    quantity: int


@dataclass(frozen=True)
class CheckoutDraft:
    user_id: str
    order_items: tuple[DraftItem, ...]
    shipping_address: dict[str, Any]
    payment_method: str
    items_price: Decimal
    tax_price: Decimal
    shipping_price: Decimal
    total_price: Decimal
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_cart(cls, cart: Cart, shipping_address: dict[str, Any], payment_method: str) -> "CheckoutDraft":
        items_price = cart.total_price
        tax_price = to_money(items_price * TAX_RATE)
        shipping_price = shipping_for(items_price)
        return cls(
            user_id=cart.user_id,
            order_items=tuple(
                DraftItem(
                    product_id=item.product_id,
                    name=item.name,
                    image=item.image,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                )
                for item in cart.items
            ),
            shipping_address=dict(shipping_address),
            payment_method=payment_method,
            items_price=items_price,
            tax_price=tax_price,
            shipping_price=shipping_price,
            total_price=to_money(items_price + tax_price + shipping_price),
            metadata={"cart_id": cart.id, "cart_revision": cart.revision},
        )
