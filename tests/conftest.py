import os
from decimal import Decimal
from pathlib import Path

import mongomock
import pytest

os.environ.setdefault("STOREFRONT_ENVIRONMENT", "test")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings():
    from storefront.shared.config import Settings

    return Settings(
        _env_file=None,
        environment="test",
        jwt_secret="test-secret",
        password_hash_rounds=4,
        client_url="https://shop.example.com",
        admin_email="owner@example.com",
    )


@pytest.fixture()
def store():
    """A fresh in-memory MongoDB per test."""
    from storefront.shared.db import Store, setup_db

    store = Store(mongomock.MongoClient(), "storefront_test")
    setup_db(store)
    yield store
    store.close()


@pytest.fixture()
def storage():
    from storefront.storage import reset_storage, set_storage
    from storefront.storage.fake_adapter import FakeStorage

    fake = FakeStorage()
    set_storage(fake)
    yield fake
    reset_storage()


@pytest.fixture()
def emails():
    from storefront.notifications.channel import reset_channels, set_email_channel
    from storefront.notifications.channel.fake_email import FakeEmailAdapter

    fake = FakeEmailAdapter()
    set_email_channel(fake)
    yield fake
    reset_channels()


@pytest.fixture()
def orders():
    from storefront.ordering.order import reset_order_service, set_order_service
    from storefront.ordering.order.fake_adapter import FakeOrderService

    fake = FakeOrderService()
    set_order_service(fake)
    yield fake
    reset_order_service()


@pytest.fixture()
def app(settings, store, storage, emails, orders):
    from storefront.app import create_app

    # An injected store leaves the adapters to the caller, so the fakes above stay installed
    return create_app(settings=settings, store=store)


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client


# ---------------------------------------------------------------------------
# Actors and tokens
# ---------------------------------------------------------------------------
def _register(store, settings, name, email, role=None):
    from storefront.identity.user.account import AccountHandler, RegisterUser
    from storefront.shared.auth import Role

    command = RegisterUser(name=name, email=email, password="secret-pass")
    return AccountHandler(store, settings).register(command, role=role or Role.USER)


@pytest.fixture()
def customer(store, settings):
    """A registered customer's session (user and token)."""
    return _register(store, settings, "Casey Customer", "casey@example.com")


@pytest.fixture()
def other_customer(store, settings):
    return _register(store, settings, "Robin Other", "robin@example.com")


@pytest.fixture()
def admin(store, settings):
    from storefront.shared.auth import Role

    return _register(store, settings, "Alex Admin", "alex@example.com", role=Role.ADMIN)


def actor_for(session):
    from storefront.shared.auth import Actor

    user = session.user
    return Actor(user_id=user.id, role=user.role, name=user.name, email=user.email)


@pytest.fixture()
def customer_actor(customer):
    return actor_for(customer)


@pytest.fixture()
def admin_actor(admin):
    return actor_for(admin)


@pytest.fixture()
def anonymous():
    from storefront.shared.auth import Actor

    return Actor.anonymous()


@pytest.fixture()
def customer_headers(customer):
    return {"Authorization": f"Bearer {customer.token}"}


@pytest.fixture()
def admin_headers(admin):
    return {"Authorization": f"Bearer {admin.token}"}


# ---------------------------------------------------------------------------
# Catalogue data
# ---------------------------------------------------------------------------
@pytest.fixture()
def category(store):
    from storefront.catalogue.category.category import Category, CategoryRepository

    return CategoryRepository(store).add(Category(name="Watches", description="Wrist watches"))


@pytest.fixture()
def make_product(store, category):
    """Factory persisting a product in the shared test category."""
    from storefront.catalogue.product.product import Product, ProductRepository

    repository = ProductRepository(store)

    def _make(name="Field Watch", price="50.00", stock=10, **overrides):
        product = Product(
            name=name,
            description=overrides.pop("description", f"{name} description"),
            price=Decimal(price),
            stock=stock,
            category_id=category.id,
            **overrides,
        )
        return repository.add(product)

    return _make
