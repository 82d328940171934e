"""Pydantic request/response schemas for the Ordering API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from storefront.shared.schemas import OutModel

# --- Cart Request Schemas ---


class AddToCartRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [{"product_id": "0b6f8d1e-3c5a-4b7e-9f21-7d4c2a1e6b90", "quantity": 2}],
        },
    )

    product_id: str = Field(..., min_length=1)
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", json_schema_extra={"examples": [{"quantity": 3}]})

    quantity: int


class ShippingAddress(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = ""
    zip_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    phone_number: str | None = None


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "shipping_address": {
                        "street": "221B Baker Street",
                        "city": "London",
                        "zip_code": "NW1 6XE",
                        "country": "UK",
                    },
                    "payment_method": "card",
                    "place_order": False,
                }
            ]
        },
    )

    shipping_address: ShippingAddress | None = None
    payment_method: str | None = None
    place_order: bool = False


# --- Admin Request Schemas ---


class MarkAbandonedRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", json_schema_extra={"examples": [{"hours": 24}]})

    hours: int | None = Field(None, ge=0)


# --- Response Schemas ---


class CartItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_id: str
    name: str
    image: str
    unit_price: float
    quantity: int
    line_total: float


class CartOut(OutModel):
    user_id: str
    items: list[CartItemOut]
    total_price: float
    item_count: int
    last_active: datetime
    is_abandoned: bool
    abandoned_at: datetime | None = None
    revision: int


class DraftItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: str
    name: str
    image: str
    unit_price: float
    quantity: int


class CheckoutDraftOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    order_items: list[DraftItemOut]
    shipping_address: dict[str, Any]
    payment_method: str
    items_price: float
    tax_price: float
    shipping_price: float
    total_price: float


class CheckoutOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_data: CheckoutDraftOut
    cart: CartOut
    order_id: str | None = None


class CartOwnerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str


class AbandonedCartOut(CartOut):
    owner: CartOwnerOut | None = None


class MarkAbandonedOut(BaseModel):
    modified_count: int


class AbandonmentStatsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_abandoned: int
    abandoned_last_24_hours: int
    total_value: float
    average_value: float
