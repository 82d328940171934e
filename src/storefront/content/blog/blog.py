"""Blog aggregate: posts with a flat comment thread."""

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, EmailStr, Field, field_validator

from storefront.shared.db import BLOGS
from storefront.shared.domain import Aggregate, Repository, new_id, utcnow
from storefront.shared.exceptions import NotPublished


class Comment(BaseModel):
    id: str = Field(default_factory=new_id)
    user_id: str | None = None
    name: str = Field(min_length=1)
    email: EmailStr
    comment: str = Field(min_length=1)
    created_at: datetime = Field(default_factory=utcnow)


class Blog(Aggregate):
    VISIBILITY: ClassVar[dict[str, Any]] = {"is_published": True}

    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    excerpt: str = Field(min_length=1, max_length=500)
    author_id: str
    featured_image: str = ""
    category: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    is_published: bool = True
    published_at: datetime | None = Field(default_factory=utcnow)
    comments: list[Comment] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        return value.strip()

    def update(self, **changes) -> None:
        was_published = self.is_published
        for name, value in changes.items():
            setattr(self, name, value)
        if self.is_published and not was_published and self.published_at is None:
            self.published_at = utcnow()
        self.touch()

    def replace_featured_image(self, url: str) -> str:
        previous = self.featured_image
        self.featured_image = url
        self.touch()
        return previous

    def add_comment(self, name: str, email: str, comment: str, user_id: str | None = None) -> Comment:
        if not self.is_published:
            raise NotPublished("Cannot comment on unpublished blog post")
        entry = Comment(user_id=user_id, name=name, email=email, comment=comment)
        self.comments.append(entry)
        self.touch()
        return entry


class BlogRepository(Repository[Blog]):
    collection_name = BLOGS
    aggregate = Blog
    not_found_message = "Blog post not found"
