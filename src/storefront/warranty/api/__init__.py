"""Warranty API package."""

from storefront.warranty.api.routes import warranty_router

__all__ = ["warranty_router"]
