"""Product aggregate root with embedded reviews."""

from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator

from storefront.shared.db import PRODUCTS
from storefront.shared.domain import Aggregate, Repository, new_id, utcnow
from storefront.shared.exceptions import ValidationError
from storefront.shared.money import to_money

MAX_IMAGES = 10
DEFAULT_WARRANTY_MONTHS = 12


class Review(BaseModel):
    """A customer's rating of a product. One per user."""

    id: str = Field(default_factory=new_id)
    user_id: str
    name: str
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1)
    created_at: datetime = Field(default_factory=utcnow)


class Product(Aggregate):
    """Product aggregate root."""

    VISIBILITY: ClassVar[dict[str, Any]] = {"is_active": True}

    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
    discount_price: Decimal | None = Field(default=None, ge=0)
    images: list[str] = Field(default_factory=list)
    category_id: str
    brand_id: str | None = None
    stock: int = Field(default=0, ge=0)
    ratings: float = 0
    num_reviews: int = 0
    featured: bool = False
    is_best_seller: bool = False
    is_new_arrival: bool = False
    is_active: bool = True
    tags: list[str] = Field(default_factory=list)
    warranty_months: int = Field(default=DEFAULT_WARRANTY_MONTHS, ge=0)
    specifications: dict[str, Any] = Field(default_factory=dict)
    reviews: list[Review] = Field(default_factory=list)

    @field_validator("price", "discount_price")
    @classmethod
    def _quantize(cls, value):
        return to_money(value) if value is not None else None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()

    @property
    def unit_price(self) -> Decimal:
        """The price a customer pays today: the discount when one is set."""
        return self.discount_price if self.discount_price else self.price

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else ""

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def update(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        self.touch()

    def add_images(self, urls: list[str]) -> None:
        if len(self.images) + len(urls) > MAX_IMAGES:
            raise ValidationError({"images": [f"Cannot have more than {MAX_IMAGES} images"]})
        self.images = [*self.images, *urls]
        self.touch()

    def replace_images(self, urls: list[str]) -> list[str]:
        """Swap the image list, returning the URLs that were dropped."""
        if len(urls) > MAX_IMAGES:
            raise ValidationError({"images": [f"Cannot have more than {MAX_IMAGES} images"]})
        previous = [url for url in self.images if url not in urls]
        self.images = list(urls)
        self.touch()
        return previous

    def remove_image(self, url: str) -> None:
        if url not in self.images:
            raise ValidationError({"url": ["Image does not belong to this product"]})
        self.images = [existing for existing in self.images if existing != url]
        self.touch()

    def add_review(self, user_id: str, name: str, rating: int, comment: str) -> Review:
        if any(review.user_id == user_id for review in self.reviews):
            raise ValidationError({"review": ["Product already reviewed"]})

        review = Review(user_id=user_id, name=name, rating=rating, comment=comment)
        self.reviews = [*self.reviews, review]
        self.num_reviews = len(self.reviews)
        self.ratings = sum(r.rating for r in self.reviews) / self.num_reviews
        self.touch()
        return review


class ProductRepository(Repository[Product]):
    collection_name = PRODUCTS
    aggregate = Product
    money_fields = ("price", "discount_price")
    not_found_message = "Product not found"
