"""Order port (abstract interface).

Checkout hands a priced draft to this collaborator; persisting the order,
reserving stock and taking payment happen behind it. Other contexts read
placed orders back through ``get``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.ordering.cart.draft import CheckoutDraft


@dataclass
class OrderResult:
    success: bool
    order_id: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class PlacedOrder:
    order_id: str
    user_id: str


class OrderPort(ABC):
    """Abstract order interface."""

    @abstractmethod
    def create(self, draft: CheckoutDraft) -> OrderResult:
        """Persist an order from ``draft`` and return its identifier."""
        ...

    @abstractmethod
    def get(self, order_id: str) -> PlacedOrder | None:
        """Return the placed order ``order_id``, or None when there is none."""
        ...
