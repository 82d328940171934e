"""Read-only product view consumed by other contexts (the cart in particular)."""

from dataclasses import dataclass
from decimal import Decimal

from storefront.catalogue.product.product import Product, ProductRepository
from storefront.shared.db import Store


@dataclass(frozen=True)
class ProductSnapshot:
    id: str
    name: str
    price: Decimal
    discount_price: Decimal | None
    stock: int
    images: tuple[str, ...]

    @property
    def unit_price(self) -> Decimal:
        return self.discount_price if self.discount_price else self.price

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else ""


def _snapshot(product: Product) -> ProductSnapshot:
    return ProductSnapshot(
        id=product.id,
        name=product.name,
        price=product.price,
        discount_price=product.discount_price,
        stock=product.stock,
        images=tuple(product.images),
    )


class ProductLookup:
    """Resolves product ids to snapshots; raises ``NotFound`` for unknown ids."""

    def __init__(self, store: Store) -> None:
        self.products = ProductRepository(store)

    def get(self, product_id: str) -> ProductSnapshot:
        return _snapshot(self.products.get(product_id))

    def get_or_none(self, product_id: str) -> ProductSnapshot | None:
        product = self.products.get_or_none(product_id)
        return _snapshot(product) if product is not None else None
