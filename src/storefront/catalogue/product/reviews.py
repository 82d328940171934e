"""Product reviews: command and handler."""

from storefront.catalogue.product.product import Product, ProductRepository
from storefront.shared.auth import Actor
from storefront.shared.db import Store
from storefront.shared.domain import Command


class AddReview(Command):
    product_id: str
    rating: int
    comment: str


class ReviewHandler:
    def __init__(self, store: Store) -> None:
        self.products = ProductRepository(store)

    def add_review(self, actor: Actor, command: AddReview) -> Product:
        actor.require_authenticated()
        product = self.products.get(command.product_id)
        product.add_review(
            user_id=actor.user_id,
            name=actor.name or "",
            rating=command.rating,
            comment=command.comment,
        )
        self.products.add(product)
        return product
