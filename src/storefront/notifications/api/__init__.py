"""Notifications API package."""

from storefront.notifications.api.routes import contact_router, newsletter_router

__all__ = ["contact_router", "newsletter_router"]
