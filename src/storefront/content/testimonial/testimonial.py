"""Testimonial aggregate: customer quotes shown once approved."""

from typing import Any, ClassVar

from pydantic import Field, field_validator

from storefront.shared.db import TESTIMONIALS
from storefront.shared.domain import Aggregate, Repository


class Testimonial(Aggregate):
    VISIBILITY: ClassVar[dict[str, Any]] = {"is_approved": True, "is_active": True}

    name: str = Field(min_length=1, max_length=100)
    position: str = ""
    company: str = ""
    image: str = ""
    content: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)
    is_approved: bool = False
    is_active: bool = True
    featured: bool = False

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()

    def approve(self) -> None:
        self.is_approved = True
        self.touch()

    def update(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        self.touch()

    def replace_image(self, url: str) -> str:
        previous = self.image
        self.image = url
        self.touch()
        return previous


class TestimonialRepository(Repository[Testimonial]):
    collection_name = TESTIMONIALS
    aggregate = Testimonial
    not_found_message = "Testimonial not found"
