"""Brand management: commands, handler and read side."""

from dataclasses import dataclass
from typing import Any

from storefront.catalogue.brand.brand import Brand, BrandRepository
from storefront.catalogue.product.product import Product, ProductRepository
from storefront.shared.auth import Actor, is_visible_to, visibility_filter
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.exceptions import Conflict, NotFound
from storefront.shared.logging import get_logger
from storefront.storage.port import StoragePort, UploadedFile

logger = get_logger(__name__)

LOGO_FOLDER = "brands"


class CreateBrand(Command):
    name: str
    description: str
    featured: bool = False
    country: str | None = None
    founded_year: int | None = None
    website: str | None = None


class UpdateBrand(Command):
    brand_id: str
    changes: dict[str, Any]


class SetBrandLogo(Command):
    brand_id: str
    file: UploadedFile


class DeleteBrand(Command):
    brand_id: str


@dataclass
class BrandDetail:
    brand: Brand
    products: list[Product]


class BrandHandler:
    def __init__(self, store: Store, storage: StoragePort) -> None:
        self.brands = BrandRepository(store)
        self.products = ProductRepository(store)
        self.storage = storage

    def create_brand(self, command: CreateBrand) -> Brand:
        if self.brands.exists({"name": command.name.strip()}):
            raise Conflict("Brand already exists")

        brand = Brand(
            name=command.name,
            description=command.description,
            featured=command.featured,
            country=command.country,
            founded_year=command.founded_year,
            website=command.website,
        )
        self.brands.add(brand)
        logger.info("Brand created", brand_id=brand.id, name=brand.name)
        return brand

    def update_brand(self, command: UpdateBrand) -> Brand:
        brand = self.brands.get(command.brand_id)
        new_name = command.changes.get("name")
        if new_name and self.brands.exists({"name": new_name.strip(), "_id": {"$ne": brand.id}}):
            raise Conflict("Brand already exists")
        brand.update(**command.changes)
        self.brands.add(brand)
        return brand

    def set_logo(self, command: SetBrandLogo) -> Brand:
        brand = self.brands.get(command.brand_id)
        f = command.file
        url = self.storage.upload(f.data, f.content_type, LOGO_FOLDER, f.filename)
        previous = brand.replace_logo(url)
        self.brands.add(brand)
        if previous:
            self.storage.delete(previous)
        return brand

    def delete_brand(self, command: DeleteBrand) -> None:
        brand = self.brands.get(command.brand_id)
        if self.products.exists({"brand_id": brand.id}):
            raise Conflict("Cannot delete brand with associated products")
        if brand.logo:
            self.storage.delete(brand.logo)
        self.brands.delete(brand)
        logger.info("Brand deleted", brand_id=brand.id)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def list_brands(self, actor: Actor) -> list[Brand]:
        return self.brands.find(visibility_filter(actor, Brand), sort=[("name", 1)])

    def featured_brands(self) -> list[Brand]:
        return self.brands.find({"featured": True, "is_active": True}, sort=[("name", 1)])

    def get_brand(self, actor: Actor, brand_id: str) -> BrandDetail:
        brand = self.brands.get(brand_id)
        if not is_visible_to(actor, brand):
            raise NotFound("Brand not found")
        products = self.products.find({"brand_id": brand.id, **visibility_filter(actor, Product)})
        return BrandDetail(brand=brand, products=products)
