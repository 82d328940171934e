"""FAQ management and read side."""

from typing import Any

import pymongo

from storefront.content.faq.faq import FAQ, FAQCategory, FAQRepository
from storefront.shared.auth import Actor, is_visible_to, visibility_filter
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.exceptions import NotFound, ValidationError


class CreateFAQ(Command):
    question: str
    answer: str
    category: str = FAQCategory.GENERAL.value
    order: int = 0


class UpdateFAQ(Command):
    faq_id: str
    changes: dict[str, Any]


def _category(value: str) -> FAQCategory:
    try:
        return FAQCategory(value)
    except ValueError:
        allowed = ", ".join(c.value for c in FAQCategory)
        raise ValidationError({"category": [f"Must be one of: {allowed}"]}) from None


class FAQHandler:
    def __init__(self, store: Store) -> None:
        self.faqs = FAQRepository(store)

    def create_faq(self, command: CreateFAQ) -> FAQ:
        faq = FAQ(
            question=command.question,
            answer=command.answer,
            category=_category(command.category),
            order=command.order,
        )
        return self.faqs.add(faq)

    def update_faq(self, command: UpdateFAQ) -> FAQ:
        faq = self.faqs.get(command.faq_id)
        changes = dict(command.changes)
        if "category" in changes:
            changes["category"] = _category(changes["category"])
        faq.update(**changes)
        return self.faqs.add(faq)

    def delete_faq(self, faq_id: str) -> None:
        self.faqs.delete(self.faqs.get(faq_id))

    def list_faqs(self, actor: Actor) -> list[FAQ]:
        return self.faqs.find(
            visibility_filter(actor, FAQ),
            sort=[("category", pymongo.ASCENDING), ("order", pymongo.ASCENDING)],
        )

    def list_by_category(self, actor: Actor, category: str) -> list[FAQ]:
        scoped = {"category": _category(category).value, **visibility_filter(actor, FAQ)}
        return self.faqs.find(scoped, sort=[("order", pymongo.ASCENDING)])

    def get_faq(self, actor: Actor, faq_id: str) -> FAQ:
        faq = self.faqs.get(faq_id)
        if not is_visible_to(actor, faq):
            raise NotFound("FAQ not found")
        return faq
