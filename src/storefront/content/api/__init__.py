"""Content API package."""

from storefront.content.api.routes import blog_router, faq_router, testimonial_router

__all__ = ["blog_router", "faq_router", "testimonial_router"]
