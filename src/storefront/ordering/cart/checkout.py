"""Checkout: validate the cart against the catalogue and price a draft order.

Checkout never decrements stock. The draft is returned to the caller and, when
order placement is requested, forwarded to the order service; a placed order
empties the cart.
"""

from dataclasses import dataclass
from typing import Any

from storefront.catalogue.product.lookup import ProductLookup
from storefront.ordering.cart.cart import Cart
from storefront.ordering.cart.draft import CheckoutDraft
from storefront.ordering.cart.repository import CartRepository
from storefront.ordering.order.port import OrderPort
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.exceptions import EmptyCart, InsufficientStock, MissingField, OrderCreationFailed, ProductGone
from storefront.shared.logging import get_logger

logger = get_logger(__name__)


class CheckoutCart(Command):
    user_id: str
    shipping_address: dict[str, Any] | None = None
    payment_method: str | None = None
    place_order: bool = False


@dataclass
class CheckoutResult:
    draft: CheckoutDraft
    cart: Cart
    order_id: str | None = None


class CheckoutHandler:
    def __init__(
        self,
        store: Store,
        products: ProductLookup | None = None,
        orders: OrderPort | None = None,
    ) -> None:
        self.carts = CartRepository(store)
        self.products = products or ProductLookup(store)
        self.orders = orders

    def _verify_stock(self, cart: Cart) -> None:
        for item in cart.items:
            product = self.products.get_or_none(item.product_id)
            if product is None:
                raise ProductGone(f"Product {item.name} no longer exists")
            if product.stock < item.quantity:
                raise InsufficientStock(f"Insufficient stock for {product.name}")

    def checkout(self, command: CheckoutCart) -> CheckoutResult:
        if not command.shipping_address or not (command.payment_method or "").strip():
            raise MissingField("Shipping address and payment method are required")

        cart = self.carts.find_one({"user_id": command.user_id})
        if cart is None or cart.is_empty:
            raise EmptyCart("Cart is empty")

        self._verify_stock(cart)
        draft = CheckoutDraft.from_cart(cart, command.shipping_address, command.payment_method.strip())
        result = CheckoutResult(draft=draft, cart=cart)

        if command.place_order:
            if self.orders is None:
                raise OrderCreationFailed("Order placement is not available")
            placed = self.orders.create(draft)
            if not placed.success:
                logger.warning("Order creation rejected", cart_id=cart.id, reason=placed.failure_reason)
                raise OrderCreationFailed(placed.failure_reason or "Order could not be created")
            result.order_id = placed.order_id
            cart.clear()
            self.carts.add(cart)
            logger.info("Order placed from cart", cart_id=cart.id, order_id=placed.order_id)
        else:
            logger.info("Checkout draft priced", cart_id=cart.id, total_price=str(draft.total_price))

        return result
