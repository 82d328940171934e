"""The management CLI against an in-memory store."""

from datetime import timedelta

import pytest

from storefront import manage
from storefront.identity.user.user import UserRepository
from storefront.ordering.cart.items import AddToCart, ManageCartItemsHandler
from storefront.shared.auth import Role
from storefront.shared.db import Store


@pytest.fixture()
def cli_store(store, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(Store, "from_settings", classmethod(lambda cls, settings: store))
    return store


class TestManage:
    def test_create_admin(self, cli_store, capsys):
        code = manage.main(
            ["create-admin", "--name", "Root", "--email", "root@example.com", "--password", "secret-pass"]
        )

        assert code == 0
        user = UserRepository(cli_store).get_by_email("root@example.com")
        assert user.role == Role.ADMIN
        assert "Admin root@example.com created" in capsys.readouterr().out

    def test_duplicate_admin_fails_cleanly(self, cli_store, admin, capsys):
        code = manage.main(
            ["create-admin", "--name", "Again", "--email", "alex@example.com", "--password", "secret-pass"]
        )

        assert code == 1
        assert "User with this email already exists" in capsys.readouterr().err

    def test_mark_abandoned(self, cli_store, customer, make_product, capsys):
        ManageCartItemsHandler(cli_store).add_to_cart(AddToCart(user_id=customer.user.id, product_id=make_product().id))
        carts = cli_store.collection("carts")
        doc = carts.find_one({})
        carts.update_one({"_id": doc["_id"]}, {"$set": {"last_active": doc["last_active"] - timedelta(hours=48)}})

        assert manage.main(["mark-abandoned", "--hours", "24"]) == 0
        assert "1 carts marked as abandoned" in capsys.readouterr().out
        assert carts.find_one({})["is_abandoned"] is True

    def test_setup_and_drop(self, cli_store, category, capsys):
        assert manage.main(["drop-db"]) == 0
        assert cli_store.collection("categories").count_documents({}) == 0
        assert manage.main(["setup-db"]) == 0
