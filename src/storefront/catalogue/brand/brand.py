"""Brand aggregate."""

from typing import Any, ClassVar

from pydantic import Field, field_validator

from storefront.shared.db import BRANDS
from storefront.shared.domain import Aggregate, Repository


class Brand(Aggregate):
    VISIBILITY: ClassVar[dict[str, Any]] = {"is_active": True}

    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)
    logo: str = ""
    featured: bool = False
    is_active: bool = True
    country: str | None = None
    founded_year: int | None = Field(default=None, ge=1000, le=9999)
    website: str | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()

    def update(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        self.touch()

    def replace_logo(self, url: str) -> str:
        previous = self.logo
        self.logo = url
        self.touch()
        return previous


class BrandRepository(Repository[Brand]):
    collection_name = BRANDS
    aggregate = Brand
    not_found_message = "Brand not found"
