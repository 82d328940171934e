"""FAQ aggregate."""

from enum import Enum
from typing import Any, ClassVar

from pydantic import Field

from storefront.shared.db import FAQS
from storefront.shared.domain import Aggregate, Repository


class FAQCategory(Enum):
    GENERAL = "general"
    PRODUCT = "product"
    SHIPPING = "shipping"
    PAYMENT = "payment"
    WARRANTY = "warranty"
    RETURNS = "returns"


class FAQ(Aggregate):
    VISIBILITY: ClassVar[dict[str, Any]] = {"is_active": True}

    question: str = Field(min_length=1, max_length=500)
    answer: str = Field(min_length=1)
    category: FAQCategory = FAQCategory.GENERAL
    order: int = 0
    is_active: bool = True

    def update(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        self.touch()


class FAQRepository(Repository[FAQ]):
    collection_name = FAQS
    aggregate = FAQ
    not_found_message = "FAQ not found"

    def to_document(self, obj: FAQ) -> dict:
        doc = super().to_document(obj)
        doc["category"] = obj.category.value
        return doc
