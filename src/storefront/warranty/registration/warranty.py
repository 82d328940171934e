"""Warranty aggregate: a customer's registration of a purchased product's serial number."""

import calendar
from datetime import UTC, datetime
from enum import Enum

from pydantic import Field, field_validator

from storefront.shared.db import WARRANTIES
from storefront.shared.domain import Aggregate, Repository
from storefront.shared.exceptions import ValidationError

MAX_DOCUMENTS = 3


def add_months(moment: datetime, months: int) -> datetime:
    """Shift ``moment`` by whole calendar months, clamping to the last day of a short month."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class WarrantyStatus(Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    VOID = "void"


class Warranty(Aggregate):
    user_id: str
    product_id: str
    order_id: str
    serial_number: str = Field(min_length=1)
    purchase_date: datetime
    expiry_date: datetime
    status: WarrantyStatus = WarrantyStatus.ACTIVE
    documents: list[str] = Field(default_factory=list)
    notes: str = ""

    @field_validator("serial_number")
    @classmethod
    def _strip_serial(cls, value: str) -> str:
        return value.strip()

    @field_validator("purchase_date", "expiry_date")
    @classmethod
    def _naive_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is not None:
            return value.astimezone(UTC).replace(tzinfo=None)
        return value

    @classmethod
    def register(
        cls,
        user_id: str,
        product_id: str,
        order_id: str,
        serial_number: str,
        purchase_date: datetime,
        period_months: int,
        documents: list[str],
    ) -> "Warranty":
        """A new active warranty running ``period_months`` from the purchase date."""
        if len(documents) > MAX_DOCUMENTS:
            raise ValidationError({"documents": [f"Cannot attach more than {MAX_DOCUMENTS} documents"]})
        return cls(
            user_id=user_id,
            product_id=product_id,
            order_id=order_id,
            serial_number=serial_number,
            purchase_date=purchase_date,
            expiry_date=add_months(purchase_date, period_months),
            documents=list(documents),
        )

    def review(self, status: WarrantyStatus | None = None, notes: str | None = None) -> None:
        """Apply an admin decision; fields left as None are kept."""
        if status is not None:
            self.status = status
        if notes:
            self.notes = notes
        self.touch()


class WarrantyRepository(Repository[Warranty]):
    collection_name = WARRANTIES
    aggregate = Warranty
    not_found_message = "Warranty not found"

    def to_document(self, obj: Warranty) -> dict:
        doc = super().to_document(obj)
        doc["status"] = obj.status.value
        return doc

    def exists_for_serial(self, serial_number: str) -> bool:
        return self.exists({"serial_number": serial_number.strip()})
