"""Response envelopes shared by every router.

Single resources: ``{"success": true, "data": {...}}``.
Collections add ``count``; paginated listings add ``total`` and ``pagination``.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from storefront.shared.listing import ListingPage

T = TypeVar("T")


class OutModel(BaseModel):
    """Base for response schemas built from domain objects."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime


class StatusResponse(BaseModel):
    success: bool = True
    message: str = "ok"


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T


class ListEnvelope(BaseModel, Generic[T]):
    success: bool = True
    count: int
    data: list[T]

    @classmethod
    def of(cls, items: list[Any], schema: type[BaseModel]) -> "ListEnvelope":
        data = [schema.model_validate(item) for item in items]
        return cls(count=len(data), data=data)


class PageEnvelope(BaseModel, Generic[T]):
    success: bool = True
    count: int
    total: int
    pagination: dict[str, dict[str, int]]
    data: list[T]

    @classmethod
    def of(cls, page: ListingPage, schema: type[BaseModel]) -> "PageEnvelope":
        data = [schema.model_validate(item) for item in page.items]
        return cls(count=len(data), total=page.total, pagination=page.pagination, data=data)
