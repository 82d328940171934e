"""Pydantic request/response schemas for the Warranty API.

Registration is a multipart form (it carries the documents), so only the
admin status update has a JSON request body.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from storefront.shared.schemas import OutModel

# --- Request Schemas ---


class WarrantyStatusRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"examples": [{"status": "void", "notes": "Case opened by a third party"}]},
    )

    status: str | None = Field(None, pattern="^(active|expired|void)$")
    notes: str | None = None


# --- Response Schemas ---


class WarrantyOut(OutModel):
    user_id: str
    product_id: str
    order_id: str
    serial_number: str
    purchase_date: datetime
    expiry_date: datetime
    status: str
    documents: list[str]
    notes: str

    @classmethod
    def from_warranty(cls, warranty) -> WarrantyOut:
        return cls.model_validate({**warranty.model_dump(), "status": warranty.status.value})
