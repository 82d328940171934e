"""Storefront FastAPI application.

Every context contributes its routers under ``/api``. Handlers run
synchronously in FastAPI's thread pool against a single ``Store``.

Usage:
    uvicorn storefront.app:create_app --factory --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager
from uuid import uuid4

import pydantic
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.catalogue.api import brand_router, category_router, product_router
from storefront.content.api import blog_router, faq_router, testimonial_router
from storefront.identity.api import user_router
from storefront.notifications.api import contact_router, newsletter_router
from storefront.notifications.channel import configure_email_channel
from storefront.ordering.api import admin_cart_router, cart_router
from storefront.shared.config import Settings, get_settings
from storefront.shared.db import Store, setup_db
from storefront.shared.exceptions import StorefrontError, field_errors
from storefront.shared.logging import bind_request, configure_logging, get_logger
from storefront.storage import configure_storage
from storefront.warranty.api import warranty_router

logger = get_logger(__name__)

API_PREFIX = "/api"


def _error_response(status_code: int, message: str, errors: dict | None = None) -> JSONResponse:
    content = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorefrontError)
    async def storefront_error(request: Request, exc: StorefrontError):
        if not exc.is_client_fault:
            logger.error("Request failed", error=exc.message, error_type=type(exc).__name__)
        return _error_response(exc.status_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return _error_response(422, "Validation failed", field_errors(exc.errors()))

    @app.exception_handler(pydantic.ValidationError)
    async def domain_validation_error(request: Request, exc: pydantic.ValidationError):
        return _error_response(400, "Validation failed", field_errors(exc.errors()))

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path)
        return _error_response(500, "Server Error")


def create_app(settings: Settings | None = None, store: Store | None = None) -> FastAPI:
    """Build the application without touching any infrastructure.

    The Store and the storage and email adapters are created from
    ``settings`` when the lifespan starts, and the Store is closed on
    shutdown. A ``store`` passed in is owned by the caller, who also installs
    the adapters; it is left open on shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        active_store = store
        if active_store is None:
            active_store = Store.from_settings(settings)
            configure_storage(settings)
            configure_email_channel(settings)
        app.state.store = active_store
        setup_db(active_store)
        logger.info("Storefront API started", environment=settings.environment)
        try:
            yield
        finally:
            if store is None:
                active_store.close()

    app = FastAPI(
        title="Storefront API",
        description="E-commerce backend: catalogue, customers, carts and checkout",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Bind a request id to every log line emitted while serving the request."""
        request_id = request.headers.get("x-request-id") or uuid4().hex
        bind_request(request_id, request.method, request.url.path)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.debug("Request processed", status_code=response.status_code)
        return response

    register_exception_handlers(app)

    for router in (
        user_router,
        product_router,
        category_router,
        brand_router,
        cart_router,
        admin_cart_router,
        blog_router,
        faq_router,
        testimonial_router,
        contact_router,
        newsletter_router,
        warranty_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    @app.get("/health")
    def health():
        return {"status": "ok", "environment": settings.environment}

    return app
