"""Configurable fake order service for development and testing.

Records every draft it receives and hands back a generated order id, or
rejects drafts when configured to fail. Accepted drafts become placed orders
that ``get`` returns.
"""

from uuid import uuid4

from storefront.ordering.cart.draft import CheckoutDraft
from storefront.ordering.order.port import OrderPort, OrderResult, PlacedOrder


class FakeOrderService(OrderPort):
    """Configurable fake order service."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Order rejected"
        self.drafts: list[CheckoutDraft] = []
        self.placed: dict[str, PlacedOrder] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Order rejected") -> None:
        """Configure order service behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create(self, draft: CheckoutDraft) -> OrderResult:
        self.drafts.append(draft)
        if self.should_succeed:
            return OrderResult(success=True, order_id=self.place(draft.user_id).order_id)
        return OrderResult(success=False, failure_reason=self.failure_reason)

    def place(self, user_id: str) -> PlacedOrder:
        """Record an order owned by ``user_id`` without going through checkout."""
        order = PlacedOrder(order_id=f"fake_order_{uuid4().hex[:12]}", user_id=user_id)
        self.placed[order.order_id] = order
        return order

    def get(self, order_id: str) -> PlacedOrder | None:
        return self.placed.get(order_id)

    def reset(self) -> None:
        self.drafts.clear()
        self.placed.clear()
        self.should_succeed = True
        self.failure_reason = "Order rejected"
