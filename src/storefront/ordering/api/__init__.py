"""Ordering API package."""

from storefront.ordering.api.routes import admin_cart_router, cart_router

__all__ = ["cart_router", "admin_cart_router"]
