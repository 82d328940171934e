"""Pydantic request/response schemas for the Content API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from storefront.shared.schemas import OutModel

# --- Blog Request Schemas ---


class CreateBlogRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "title": "How to pick a dive watch",
                    "content": "Water resistance is only the beginning...",
                    "excerpt": "What to look for beyond the depth rating.",
                    "category": "guides",
                    "tags": ["diver", "buying-guide"],
                }
            ]
        },
    )

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    excerpt: str = Field(..., min_length=1, max_length=500)
    category: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    is_published: bool = True


class UpdateBlogRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1)
    excerpt: str | None = Field(None, min_length=1, max_length=500)
    category: str | None = Field(None, min_length=1)
    tags: list[str] | None = None
    is_published: bool | None = None


class AddCommentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    email: EmailStr
    comment: str = Field(..., min_length=1)


# --- FAQ Request Schemas ---


class CreateFAQRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    question: str = Field(..., min_length=1, max_length=500)
    answer: str = Field(..., min_length=1)
    category: str = "general"
    order: int = 0


class UpdateFAQRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    question: str | None = Field(None, min_length=1, max_length=500)
    answer: str | None = Field(None, min_length=1)
    category: str | None = None
    order: int | None = None
    is_active: bool | None = None


# --- Testimonial Request Schemas ---


class SubmitTestimonialRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [{"name": "Sam Lee", "company": "Acme", "content": "Fast delivery, great watch.", "rating": 5}]
        },
    )

    name: str = Field(..., min_length=1, max_length=100)
    position: str = ""
    company: str = ""
    content: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    is_approved: bool = False
    featured: bool = False


class UpdateTestimonialRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=100)
    position: str | None = None
    company: str | None = None
    content: str | None = Field(None, min_length=1)
    rating: int | None = Field(None, ge=1, le=5)
    is_approved: bool | None = None
    is_active: bool | None = None
    featured: bool | None = None


# --- Response Schemas ---


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str | None = None
    name: str
    email: str
    comment: str
    created_at: datetime


class BlogOut(OutModel):
    title: str
    content: str
    excerpt: str
    author_id: str
    featured_image: str
    category: str
    tags: list[str]
    is_published: bool
    published_at: datetime | None = None
    comments: list[CommentOut]


class FAQOut(OutModel):
    question: str
    answer: str
    category: str
    order: int
    is_active: bool

    @classmethod
    def from_faq(cls, faq) -> FAQOut:
        return cls.model_validate({**faq.model_dump(), "category": faq.category.value})


class TestimonialOut(OutModel):
    name: str
    position: str
    company: str
    image: str
    content: str
    rating: int
    is_approved: bool
    is_active: bool
    featured: bool
