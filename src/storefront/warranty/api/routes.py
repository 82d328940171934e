"""FastAPI endpoints for the Warranty context."""

from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from storefront.dependencies import admin_actor, current_actor, get_storage_port, get_store, read_upload
from storefront.ordering.order import get_order_service
from storefront.shared.auth import Actor
from storefront.shared.db import Store
from storefront.shared.schemas import Envelope, ListEnvelope, PageEnvelope, StatusResponse
from storefront.storage.port import StoragePort
from storefront.warranty.api.schemas import WarrantyOut, WarrantyStatusRequest
from storefront.warranty.registration.registry import RegisterWarranty, UpdateWarrantyStatus, WarrantyRegistry

warranty_router = APIRouter(prefix="/warranty", tags=["warranty"])

DOCUMENT_TYPES = ("image/", "application/pdf")


def _registry(store: Store, storage: StoragePort) -> WarrantyRegistry:
    return WarrantyRegistry(store, orders=get_order_service(), storage=storage)


@warranty_router.post("", status_code=201, response_model=Envelope[WarrantyOut])
def register_warranty(
    product_id: str = Form(...),
    order_id: str = Form(...),
    serial_number: str = Form(...),
    purchase_date: datetime = Form(...),
    documents: list[UploadFile] | None = File(None),
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = RegisterWarranty(
        user_id=actor.user_id,
        product_id=product_id,
        order_id=order_id,
        serial_number=serial_number,
        purchase_date=purchase_date,
        files=[read_upload(f, allowed_prefix=DOCUMENT_TYPES) for f in documents or []],
    )
    warranty = _registry(store, storage).register(command)
    return Envelope(data=WarrantyOut.from_warranty(warranty))


@warranty_router.get("", response_model=ListEnvelope[WarrantyOut])
def list_my_warranties(
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> ListEnvelope:
    data = [WarrantyOut.from_warranty(w) for w in _registry(store, storage).list_for_user(actor)]
    return ListEnvelope(count=len(data), data=data)


# Declared before "/{warranty_id}" so "all" is not taken for an id
@warranty_router.get("/all", response_model=PageEnvelope[WarrantyOut])
def list_all_warranties(
    request: Request,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> PageEnvelope:
    page = _registry(store, storage).list_all(request.query_params)
    data = [WarrantyOut.from_warranty(w) for w in page.items]
    return PageEnvelope(count=len(data), total=page.total, pagination=page.pagination, data=data)


@warranty_router.get("/{warranty_id}", response_model=Envelope[WarrantyOut])
def get_warranty(
    warranty_id: str,
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    return Envelope(data=WarrantyOut.from_warranty(_registry(store, storage).get_warranty(actor, warranty_id)))


@warranty_router.put("/{warranty_id}", response_model=Envelope[WarrantyOut])
def update_warranty_status(
    warranty_id: str,
    body: WarrantyStatusRequest,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = UpdateWarrantyStatus(warranty_id=warranty_id, status=body.status, notes=body.notes)
    return Envelope(data=WarrantyOut.from_warranty(_registry(store, storage).update_status(command)))


@warranty_router.delete("/{warranty_id}", response_model=StatusResponse)
def delete_warranty(
    warranty_id: str,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> StatusResponse:
    _registry(store, storage).delete_warranty(warranty_id)
    return StatusResponse(message="Warranty deleted successfully")
