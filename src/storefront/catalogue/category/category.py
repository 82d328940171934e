"""Category aggregate: a two-level product taxonomy."""

from typing import Any, ClassVar

from pydantic import Field, field_validator

from storefront.shared.db import CATEGORIES
from storefront.shared.domain import Aggregate, Repository


class Category(Aggregate):
    VISIBILITY: ClassVar[dict[str, Any]] = {"is_active": True}

    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    image: str = ""
    parent_id: str | None = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None

    def update(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        self.touch()

    def replace_image(self, url: str) -> str:
        """Set a new image, returning the previous URL (empty when none)."""
        previous = self.image
        self.image = url
        self.touch()
        return previous


class CategoryRepository(Repository[Category]):
    collection_name = CATEGORIES
    aggregate = Category
    not_found_message = "Category not found"
