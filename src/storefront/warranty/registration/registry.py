"""Warranty registration: commands, handler and queries.

A customer registers the serial number of a product bought in one of their
own orders. Proof-of-purchase documents live in object storage under the
``warranty-documents`` folder and are removed with the warranty.
"""

from collections.abc import Mapping
from datetime import datetime

import pymongo
from pydantic import Field

from storefront.catalogue.product.product import ProductRepository
from storefront.ordering.order.port import OrderPort
from storefront.shared.auth import Actor
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.exceptions import Conflict, Forbidden, NotFound, ValidationError
from storefront.shared.listing import ListingPage, paginate, parse_listing
from storefront.shared.logging import get_logger
from storefront.storage.port import StoragePort, UploadedFile
from storefront.warranty.registration.warranty import MAX_DOCUMENTS, Warranty, WarrantyRepository, WarrantyStatus

logger = get_logger(__name__)

DOCUMENT_FOLDER = "warranty-documents"

FILTERABLE = {"status": str, "user_id": str, "product_id": str}


class RegisterWarranty(Command):
    user_id: str
    product_id: str
    order_id: str
    serial_number: str = Field(min_length=1)
    purchase_date: datetime
    files: list[UploadedFile] = Field(default_factory=list, max_length=MAX_DOCUMENTS)


class UpdateWarrantyStatus(Command):
    warranty_id: str
    status: str | None = None
    notes: str | None = None


class WarrantyRegistry:
    def __init__(self, store: Store, orders: OrderPort, storage: StoragePort) -> None:
        self.warranties = WarrantyRepository(store)
        self.products = ProductRepository(store)
        self.orders = orders
        self.storage = storage

    def register(self, command: RegisterWarranty) -> Warranty:
        product = self.products.get(command.product_id)

        order = self.orders.get(command.order_id)
        if order is None:
            raise NotFound("Order not found")
        if order.user_id != command.user_id:
            raise Forbidden("Not authorized to register warranty for this order")

        if self.warranties.exists_for_serial(command.serial_number):
            raise Conflict("Warranty already registered for this serial number")

        documents = [
            self.storage.upload(f.data, f.content_type, DOCUMENT_FOLDER, f.filename) for f in command.files
        ]
        warranty = Warranty.register(
            user_id=command.user_id,
            product_id=product.id,
            order_id=order.order_id,
            serial_number=command.serial_number,
            purchase_date=command.purchase_date,
            period_months=product.warranty_months,
            documents=documents,
        )
        self.warranties.add(warranty)
        logger.info(
            "Warranty registered",
            warranty_id=warranty.id,
            product_id=product.id,
            expires=warranty.expiry_date.date().isoformat(),
        )
        return warranty

    def list_for_user(self, actor: Actor) -> list[Warranty]:
        actor.require_authenticated()
        return self.warranties.find({"user_id": actor.user_id}, sort=[("created_at", pymongo.DESCENDING)])

    def list_all(self, params: Mapping[str, str]) -> ListingPage:
        return paginate(self.warranties, parse_listing(params, FILTERABLE))

    def get_warranty(self, actor: Actor, warranty_id: str) -> Warranty:
        warranty = self.warranties.get(warranty_id)
        actor.require_owner(warranty.user_id)
        return warranty

    def update_status(self, command: UpdateWarrantyStatus) -> Warranty:
        status = None
        if command.status:
            try:
                status = WarrantyStatus(command.status)
            except ValueError:
                allowed = ", ".join(s.value for s in WarrantyStatus)
                raise ValidationError({"status": [f"Must be one of: {allowed}"]}) from None
        warranty = self.warranties.get(command.warranty_id)
        warranty.review(status=status, notes=command.notes)
        return self.warranties.add(warranty)

    def delete_warranty(self, warranty_id: str) -> None:
        warranty = self.warranties.get(warranty_id)
        for url in warranty.documents:
            self.storage.delete(url)
        self.warranties.delete(warranty)
        logger.info("Warranty deleted", warranty_id=warranty.id, documents=len(warranty.documents))
