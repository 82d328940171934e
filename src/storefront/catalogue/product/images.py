"""Image management: commands and handler.

Images live in object storage under the ``products`` folder; the product keeps
their public URLs in display order.
"""

from storefront.catalogue.product.product import Product, ProductRepository
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.logging import get_logger
from storefront.storage.port import StoragePort, UploadedFile

logger = get_logger(__name__)

IMAGE_FOLDER = "products"


class AddProductImages(Command):
    product_id: str
    files: list[UploadedFile]


class ReplaceProductImages(Command):
    product_id: str
    files: list[UploadedFile]


class RemoveProductImage(Command):
    product_id: str
    url: str


class ManageImagesHandler:
    def __init__(self, store: Store, storage: StoragePort) -> None:
        self.products = ProductRepository(store)
        self.storage = storage

    def _upload(self, files: list[UploadedFile]) -> list[str]:
        return [self.storage.upload(f.data, f.content_type, IMAGE_FOLDER, f.filename) for f in files]

    def add_images(self, command: AddProductImages) -> Product:
        product = self.products.get(command.product_id)
        product.add_images(self._upload(command.files))
        self.products.add(product)
        return product

    def replace_images(self, command: ReplaceProductImages) -> Product:
        product = self.products.get(command.product_id)
        dropped = product.replace_images(self._upload(command.files))
        self.products.add(product)

        for url in dropped:
            self.storage.delete(url)
        logger.info("Product images replaced", product_id=product.id, removed=len(dropped))
        return product

    def remove_image(self, command: RemoveProductImage) -> Product:
        product = self.products.get(command.product_id)
        product.remove_image(command.url)
        self.products.add(product)
        self.storage.delete(command.url)
        return product
