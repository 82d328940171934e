"""Testimonial submission, moderation and read side.

Anyone may submit a testimonial; it stays hidden until an admin approves it.
Admin submissions may be approved and featured up front.
"""

from typing import Any

import pymongo

from storefront.content.testimonial.testimonial import Testimonial, TestimonialRepository
from storefront.shared.auth import Actor, visibility_filter
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.logging import get_logger
from storefront.storage.port import StoragePort, UploadedFile

logger = get_logger(__name__)

IMAGE_FOLDER = "testimonials"
FEATURED_LIMIT = 6


class SubmitTestimonial(Command):
    name: str
    content: str
    rating: int
    position: str = ""
    company: str = ""
    is_approved: bool = False
    featured: bool = False


class UpdateTestimonial(Command):
    testimonial_id: str
    changes: dict[str, Any]


class SetTestimonialImage(Command):
    testimonial_id: str
    file: UploadedFile


class TestimonialHandler:
    def __init__(self, store: Store, storage: StoragePort | None = None) -> None:
        self.testimonials = TestimonialRepository(store)
        self.storage = storage

    def submit(self, actor: Actor, command: SubmitTestimonial) -> Testimonial:
        moderated = actor.is_admin
        testimonial = Testimonial(
            name=command.name,
            position=command.position,
            company=command.company,
            content=command.content,
            rating=command.rating,
            is_approved=command.is_approved and moderated,
            featured=command.featured and moderated,
        )
        self.testimonials.add(testimonial)
        logger.info("Testimonial submitted", testimonial_id=testimonial.id, approved=testimonial.is_approved)
        return testimonial

    def approve(self, actor: Actor, testimonial_id: str) -> Testimonial:
        actor.require_admin()
        testimonial = self.testimonials.get(testimonial_id)
        testimonial.approve()
        return self.testimonials.add(testimonial)

    def update(self, actor: Actor, command: UpdateTestimonial) -> Testimonial:
        actor.require_admin()
        testimonial = self.testimonials.get(command.testimonial_id)
        testimonial.update(**command.changes)
        return self.testimonials.add(testimonial)

    def set_image(self, actor: Actor, command: SetTestimonialImage) -> Testimonial:
        actor.require_admin()
        testimonial = self.testimonials.get(command.testimonial_id)
        f = command.file
        url = self.storage.upload(f.data, f.content_type, IMAGE_FOLDER, f.filename)
        previous = testimonial.replace_image(url)
        self.testimonials.add(testimonial)
        if previous:
            self.storage.delete(previous)
        return testimonial

    def delete(self, actor: Actor, testimonial_id: str) -> None:
        actor.require_admin()
        testimonial = self.testimonials.get(testimonial_id)
        if testimonial.image:
            self.storage.delete(testimonial.image)
        self.testimonials.delete(testimonial)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get(self, actor: Actor, testimonial_id: str) -> Testimonial:
        actor.require_admin()
        return self.testimonials.get(testimonial_id)

    def list_testimonials(self, actor: Actor) -> list[Testimonial]:
        return self.testimonials.find(
            visibility_filter(actor, Testimonial),
            sort=[("created_at", pymongo.DESCENDING)],
        )

    def featured(self) -> list[Testimonial]:
        scoped = {"featured": True, **Testimonial.VISIBILITY}
        return self.testimonials.find(scoped, sort=[("created_at", pymongo.DESCENDING)], limit=FEATURED_LIMIT)
