"""User address book and wishlist: commands and handler."""

from typing import Any

from pydantic import Field

from storefront.catalogue.product.product import Product, ProductRepository
from storefront.identity.user.user import Address, UserRepository
from storefront.shared.auth import Actor
from storefront.shared.db import Store
from storefront.shared.domain import Command


class AddAddress(Command):
    name: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    phone_number: str | None = None
    is_default: bool = False


class UpdateAddress(Command):
    address_id: str
    changes: dict[str, Any] = Field(default_factory=dict)


class AddressBookHandler:
    def __init__(self, store: Store) -> None:
        self.users = UserRepository(store)
        self.products = ProductRepository(store)

    def list_addresses(self, actor: Actor) -> list[Address]:
        actor.require_authenticated()
        return self.users.get(actor.user_id).addresses

    def add_address(self, actor: Actor, command: AddAddress) -> list[Address]:
        actor.require_authenticated()
        user = self.users.get(actor.user_id)
        user.add_address(
            name=command.name,
            street=command.street,
            city=command.city,
            state=command.state,
            zip_code=command.zip_code,
            country=command.country,
            phone_number=command.phone_number,
            is_default=command.is_default,
        )
        self.users.add(user)
        return user.addresses

    def update_address(self, actor: Actor, command: UpdateAddress) -> list[Address]:
        actor.require_authenticated()
        user = self.users.get(actor.user_id)
        user.update_address(command.address_id, **command.changes)
        self.users.add(user)
        return user.addresses

    def remove_address(self, actor: Actor, address_id: str) -> list[Address]:
        actor.require_authenticated()
        user = self.users.get(actor.user_id)
        user.remove_address(address_id)
        self.users.add(user)
        return user.addresses

    def set_default_address(self, actor: Actor, address_id: str) -> list[Address]:
        actor.require_authenticated()
        user = self.users.get(actor.user_id)
        user.set_default_address(address_id)
        self.users.add(user)
        return user.addresses

    # -------------------------------------------------------------------
    # Wishlist
    # -------------------------------------------------------------------
    def wishlist(self, actor: Actor) -> list[Product]:
        actor.require_authenticated()
        user = self.users.get(actor.user_id)
        if not user.wishlist:
            return []
        found = {p.id: p for p in self.products.find({"_id": {"$in": user.wishlist}})}
        return [found[product_id] for product_id in user.wishlist if product_id in found]

    def add_to_wishlist(self, actor: Actor, product_id: str) -> list[Product]:
        actor.require_authenticated()
        self.products.get(product_id)
        user = self.users.get(actor.user_id)
        user.add_to_wishlist(product_id)
        self.users.add(user)
        return self.wishlist(actor)

    def remove_from_wishlist(self, actor: Actor, product_id: str) -> list[Product]:
        actor.require_authenticated()
        user = self.users.get(actor.user_id)
        user.remove_from_wishlist(product_id)
        self.users.add(user)
        return self.wishlist(actor)
