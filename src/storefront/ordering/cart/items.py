"""Cart item management: commands and handler."""

import pydantic
from pydantic import Field

from storefront.catalogue.product.lookup import ProductLookup
from storefront.ordering.cart.cart import Cart
from storefront.ordering.cart.repository import CartRepository
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.exceptions import ConcurrentModification, InvalidQuantity, StorefrontError
from storefront.shared.logging import get_logger

logger = get_logger(__name__)


class CartCommand(Command):
    @classmethod
    def rejected(cls, exc: pydantic.ValidationError) -> StorefrontError:
        if any(error["loc"][:1] == ("quantity",) for error in exc.errors()):
            return InvalidQuantity("Quantity must be at least 1")
        return super().rejected(exc)


class AddToCart(CartCommand):
    user_id: str
    product_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartQuantity(CartCommand):
    user_id: str
    item_id: str
    quantity: int = Field(ge=1)


class RemoveFromCart(Command):
    user_id: str
    item_id: str


class ClearCart(Command):
    user_id: str


class ManageCartItemsHandler:
    def __init__(self, store: Store, products: ProductLookup | None = None) -> None:
        self.carts = CartRepository(store)
        self.products = products or ProductLookup(store)

    def get_cart(self, user_id: str) -> Cart:
        """Return the user's cart, creating an empty one on first access."""
        cart = self.carts.find_one({"user_id": user_id})
        if cart is not None:
            return cart

        cart = Cart.create(user_id)
        try:
            self.carts.add(cart)
        except ConcurrentModification:
            # Another request created it first
            return self.carts.get_for_user(user_id)
        logger.info("Cart created", cart_id=cart.id, user_id=user_id)
        return cart

    def add_to_cart(self, command: AddToCart) -> Cart:
        product = self.products.get(command.product_id)
        cart = self.get_cart(command.user_id)
        cart.add_item(product, command.quantity)
        self.carts.add(cart)
        return cart

    def update_cart_quantity(self, command: UpdateCartQuantity) -> Cart:
        cart = self.carts.get_for_user(command.user_id)
        item = cart.find_item(command.item_id)
        product = self.products.get(item.product_id)
        cart.update_item_quantity(command.item_id, command.quantity, product.stock)
        self.carts.add(cart)
        return cart

    def remove_from_cart(self, command: RemoveFromCart) -> Cart:
        cart = self.carts.get_for_user(command.user_id)
        cart.remove_item(command.item_id)
        self.carts.add(cart)
        return cart

    def clear_cart(self, command: ClearCart) -> Cart:
        cart = self.carts.get_for_user(command.user_id)
        cart.clear()
        self.carts.add(cart)
        return cart
