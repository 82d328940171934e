"""Blog management and read side.

Posts are written by admins; anyone may read a published post and comment on
it. Unpublished posts are visible to admins only.
"""

import re
from collections.abc import Mapping
from typing import Any

from pydantic import Field

from storefront.content.blog.blog import Blog, BlogRepository, Comment
from storefront.shared.auth import Actor, is_visible_to, visibility_filter
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.exceptions import NotFound
from storefront.shared.listing import ListingPage, as_bool, paginate, parse_listing
from storefront.shared.logging import get_logger
from storefront.storage.port import StoragePort, UploadedFile

logger = get_logger(__name__)

IMAGE_FOLDER = "blogs"

FILTERABLE = {
    "title": str,
    "category": str,
    "tags": str,
    "author_id": str,
    "is_published": as_bool,
}


class CreateBlog(Command):
    title: str
    content: str
    excerpt: str
    category: str
    tags: list[str] = Field(default_factory=list)
    is_published: bool = True


class UpdateBlog(Command):
    blog_id: str
    changes: dict[str, Any]


class SetBlogImage(Command):
    blog_id: str
    file: UploadedFile


class AddComment(Command):
    blog_id: str
    name: str
    email: str
    comment: str


class BlogHandler:
    def __init__(self, store: Store, storage: StoragePort | None = None) -> None:
        self.blogs = BlogRepository(store)
        self.storage = storage

    def create_blog(self, actor: Actor, command: CreateBlog) -> Blog:
        actor.require_admin()
        blog = Blog(
            title=command.title,
            content=command.content,
            excerpt=command.excerpt,
            category=command.category,
            tags=list(command.tags),
            is_published=command.is_published,
            author_id=actor.user_id,
            published_at=None,
        )
        if blog.is_published:
            blog.published_at = blog.created_at
        self.blogs.add(blog)
        logger.info("Blog post created", blog_id=blog.id, author_id=actor.user_id)
        return blog

    def update_blog(self, actor: Actor, command: UpdateBlog) -> Blog:
        actor.require_admin()
        blog = self.blogs.get(command.blog_id)
        blog.update(**command.changes)
        self.blogs.add(blog)
        return blog

    def set_image(self, actor: Actor, command: SetBlogImage) -> Blog:
        actor.require_admin()
        blog = self.blogs.get(command.blog_id)
        f = command.file
        url = self.storage.upload(f.data, f.content_type, IMAGE_FOLDER, f.filename)
        previous = blog.replace_featured_image(url)
        self.blogs.add(blog)
        if previous:
            self.storage.delete(previous)
        return blog

    def delete_blog(self, actor: Actor, blog_id: str) -> None:
        actor.require_admin()
        blog = self.blogs.get(blog_id)
        if blog.featured_image:
            self.storage.delete(blog.featured_image)
        self.blogs.delete(blog)
        logger.info("Blog post deleted", blog_id=blog.id)

    # -------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------
    def add_comment(self, actor: Actor, command: AddComment) -> Comment:
        blog = self.blogs.get(command.blog_id)
        comment = blog.add_comment(
            name=command.name,
            email=command.email,
            comment=command.comment,
            user_id=actor.user_id,
        )
        self.blogs.add(blog)
        return comment

    def list_comments(self, actor: Actor, blog_id: str) -> list[Comment]:
        return self.get_blog(actor, blog_id).comments

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get_blog(self, actor: Actor, blog_id: str) -> Blog:
        blog = self.blogs.get(blog_id)
        if not is_visible_to(actor, blog):
            raise NotFound("Blog post not found")
        return blog

    def list_blogs(self, actor: Actor, params: Mapping[str, str]) -> ListingPage:
        listing = parse_listing(params, FILTERABLE)
        scope = visibility_filter(actor, Blog)
        term = (params.get("search") or "").strip()
        if term:
            pattern = {"$regex": re.escape(term), "$options": "i"}
            scope["$or"] = [{"title": pattern}, {"content": pattern}, {"tags": term}]
        return paginate(self.blogs, listing, scope=scope)
