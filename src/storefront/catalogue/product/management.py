"""Product creation, update and deletion: commands and handler."""

from decimal import Decimal
from typing import Any

from pydantic import Field

from storefront.catalogue.brand.brand import BrandRepository
from storefront.catalogue.category.category import CategoryRepository
from storefront.catalogue.product.product import DEFAULT_WARRANTY_MONTHS, Product, ProductRepository
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.exceptions import NotFound
from storefront.shared.logging import get_logger
from storefront.storage.port import StoragePort

logger = get_logger(__name__)


class CreateProduct(Command):
    name: str
    description: str
    price: Decimal
    category_id: str
    brand_id: str | None = None
    discount_price: Decimal | None = None
    stock: int = 0
    featured: bool = False
    is_best_seller: bool = False
    is_new_arrival: bool = False
    tags: list[str] = Field(default_factory=list)
    specifications: dict[str, Any] = Field(default_factory=dict)
    warranty_months: int = DEFAULT_WARRANTY_MONTHS


class UpdateProduct(Command):
    product_id: str
    changes: dict[str, Any]


class DeleteProduct(Command):
    product_id: str


class ProductManagementHandler:
    def __init__(self, store: Store, storage: StoragePort) -> None:
        self.products = ProductRepository(store)
        self.categories = CategoryRepository(store)
        self.brands = BrandRepository(store)
        self.storage = storage

    def _check_references(self, category_id: str | None, brand_id: str | None) -> None:
        if category_id is not None and not self.categories.exists({"_id": category_id}):
            raise NotFound("Category not found")
        if brand_id is not None and not self.brands.exists({"_id": brand_id}):
            raise NotFound("Brand not found")

    def create_product(self, command: CreateProduct) -> Product:
        self._check_references(command.category_id, command.brand_id)
        product = Product(
            name=command.name,
            description=command.description,
            price=command.price,
            discount_price=command.discount_price,
            category_id=command.category_id,
            brand_id=command.brand_id,
            stock=command.stock,
            featured=command.featured,
            is_best_seller=command.is_best_seller,
            is_new_arrival=command.is_new_arrival,
            tags=list(command.tags),
            specifications=dict(command.specifications),
            warranty_months=command.warranty_months,
        )
        self.products.add(product)
        logger.info("Product created", product_id=product.id, name=product.name)
        return product

    def update_product(self, command: UpdateProduct) -> Product:
        product = self.products.get(command.product_id)
        self._check_references(command.changes.get("category_id"), command.changes.get("brand_id"))
        product.update(**command.changes)
        self.products.add(product)
        logger.info("Product updated", product_id=product.id, fields=sorted(command.changes))
        return product

    def delete_product(self, command: DeleteProduct) -> None:
        product = self.products.get(command.product_id)
        for url in product.images:
            self.storage.delete(url)
        self.products.delete(product)
        logger.info("Product deleted", product_id=product.id, images=len(product.images))
