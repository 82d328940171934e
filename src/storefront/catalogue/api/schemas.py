"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from storefront.shared.schemas import OutModel

# --- Product Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "name": "Seamaster Diver 300M",
                    "description": "Automatic dive watch, 42mm steel case.",
                    "price": 5200.00,
                    "discount_price": 4899.99,
                    "category_id": "4f1c2a9e-1a7b-4a44-9d6e-0c3e7f5b8a21",
                    "brand_id": "a1b2c3d4-0000-4000-8000-000000000001",
                    "stock": 12,
                    "featured": True,
                    "tags": ["diver", "automatic"],
                    "specifications": {"case_size_mm": 42, "movement": "automatic"},
                }
            ]
        },
    )

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    discount_price: Decimal | None = Field(None, ge=0)
    category_id: str
    brand_id: str | None = None
    stock: int = Field(0, ge=0)
    featured: bool = False
    is_best_seller: bool = False
    is_new_arrival: bool = False
    tags: list[str] = Field(default_factory=list)
    specifications: dict[str, Any] = Field(default_factory=dict)
    warranty_months: int = Field(12, ge=0)


class UpdateProductRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1)
    price: Decimal | None = Field(None, ge=0)
    discount_price: Decimal | None = Field(None, ge=0)
    category_id: str | None = None
    brand_id: str | None = None
    stock: int | None = Field(None, ge=0)
    featured: bool | None = None
    is_best_seller: bool | None = None
    is_new_arrival: bool | None = None
    is_active: bool | None = None
    tags: list[str] | None = None
    specifications: dict[str, Any] | None = None
    warranty_months: int | None = Field(None, ge=0)


class AddReviewRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"examples": [{"rating": 5, "comment": "Keeps perfect time."}]},
    )

    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1)


# --- Category Request Schemas ---


class CreateCategoryRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    parent_id: str | None = None


class UpdateCategoryRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    parent_id: str | None = None
    is_active: bool | None = None


# --- Brand Request Schemas ---


class CreateBrandRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    featured: bool = False
    country: str | None = None
    founded_year: int | None = Field(None, ge=1000, le=9999)
    website: HttpUrl | None = None


class UpdateBrandRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1)
    featured: bool | None = None
    is_active: bool | None = None
    country: str | None = None
    founded_year: int | None = Field(None, ge=1000, le=9999)
    website: HttpUrl | None = None


# --- Response Schemas ---


class ReviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    rating: int
    comment: str
    created_at: datetime


class ProductOut(OutModel):
    name: str
    description: str
    price: float
    discount_price: float | None = None
    images: list[str]
    category_id: str
    brand_id: str | None = None
    stock: int
    ratings: float
    num_reviews: int
    featured: bool
    is_best_seller: bool
    is_new_arrival: bool
    is_active: bool
    tags: list[str]
    specifications: dict[str, Any]
    warranty_months: int
    reviews: list[ReviewOut]


class CategoryOut(OutModel):
    name: str
    description: str
    image: str
    parent_id: str | None = None
    is_active: bool


class CategoryTreeOut(CategoryOut):
    subcategories: list[CategoryOut]

    @classmethod
    def from_tree(cls, tree) -> CategoryTreeOut:
        return cls.model_validate(
            {
                **CategoryOut.model_validate(tree.category).model_dump(),
                "subcategories": [CategoryOut.model_validate(c) for c in tree.subcategories],
            }
        )


class BrandOut(OutModel):
    name: str
    description: str
    logo: str
    featured: bool
    is_active: bool
    country: str | None = None
    founded_year: int | None = None
    website: str | None = None


class BrandDetailOut(BrandOut):
    products: list[ProductOut]

    @classmethod
    def from_detail(cls, detail) -> BrandDetailOut:
        return cls.model_validate(
            {
                **BrandOut.model_validate(detail.brand).model_dump(),
                "products": [ProductOut.model_validate(p) for p in detail.products],
            }
        )
