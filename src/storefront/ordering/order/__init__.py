"""Order service factory.

Provides get_order_service() / set_order_service() to swap implementations.
Defaults to FakeOrderService, which only records drafts.
"""

from storefront.ordering.order.port import OrderPort

_current_service: OrderPort | None = None


def get_order_service() -> OrderPort:
    """Return the current order service. Defaults to FakeOrderService."""
    global _current_service
    if _current_service is None:
        from storefront.ordering.order.fake_adapter import FakeOrderService

        _current_service = FakeOrderService()
    return _current_service


def set_order_service(service: OrderPort) -> None:
    """Override the active order service (useful for tests)."""
    global _current_service
    _current_service = service


def reset_order_service() -> None:
    """Reset to default order service."""
    global _current_service
    _current_service = None
