"""Tests for cart line-item management on the Cart aggregate."""

from datetime import datetime
from decimal import Decimal

import pydantic
import pytest
from freezegun import freeze_time

from storefront.catalogue.product.lookup import ProductSnapshot
from storefront.ordering.cart.cart import Cart
from storefront.shared.exceptions import InsufficientStock, NotAbandoned, NotFound, OutOfStock


def _product(product_id="prod-001", price="25.00", discount=None, stock=10, images=("https://img/1.jpg",)):
    return ProductSnapshot(
        id=product_id,
        name=f"Product {product_id}",
        price=Decimal(price),
        discount_price=Decimal(discount) if discount is not None else None,
        stock=stock,
        images=tuple(images),
    )


def _make_cart():
    return Cart.create(user_id="user-001")


class TestAddItem:
    def test_add_item_creates_line_with_snapshot(self):
        cart = _make_cart()
        cart.add_item(_product(), 2)

        assert len(cart.items) == 1
        line = cart.items[0]
        assert line.product_id == "prod-001"
        assert line.name == "Product prod-001"
        assert line.image == "https://img/1.jpg"
        assert line.unit_price == Decimal("25.00")
        assert line.quantity == 2

    def test_discount_price_is_snapshotted_when_set(self):
        cart = _make_cart()
        cart.add_item(_product(price="30.00", discount="19.99"), 1)
        assert cart.items[0].unit_price == Decimal("19.99")

    def test_same_product_merges_into_one_line(self):
        cart = _make_cart()
        cart.add_item(_product(), 1)
        cart.add_item(_product(), 2)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3

    def test_merge_keeps_original_snapshot_price(self):
        cart = _make_cart()
        cart.add_item(_product(price="25.00"), 1)
        cart.add_item(_product(price="40.00"), 1)
        assert cart.items[0].unit_price == Decimal("25.00")

    def test_different_products_keep_insertion_order(self):
        cart = _make_cart()
        cart.add_item(_product("prod-001"), 1)
        cart.add_item(_product("prod-002"), 1)
        cart.add_item(_product("prod-001"), 1)
        assert [i.product_id for i in cart.items] == ["prod-001", "prod-002"]

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_is_rejected(self, quantity):
        cart = _make_cart()
        with pytest.raises(pydantic.ValidationError):
            cart.add_item(_product(), quantity)
        assert cart.is_empty

    def test_quantity_above_stock_is_rejected(self):
        cart = _make_cart()
        with pytest.raises(OutOfStock):
            cart.add_item(_product(stock=2), 3)
        assert cart.is_empty

    def test_out_of_stock_product_is_rejected(self):
        cart = _make_cart()
        with pytest.raises(OutOfStock, match="out of stock"):
            cart.add_item(_product(stock=0), 1)

    def test_merge_beyond_stock_is_rejected_without_change(self):
        cart = _make_cart()
        cart.add_item(_product(stock=5), 4)
        before = cart.model_dump()

        with pytest.raises(InsufficientStock, match="Cannot add more than 5 units"):
            cart.add_item(_product(stock=5), 2)

        assert cart.model_dump() == before
        assert cart.items[0].quantity == 4


class TestTotals:
    def test_empty_cart_totals_zero(self):
        cart = _make_cart()
        assert cart.total_price == Decimal("0.00")
        assert cart.item_count == 0

    def test_total_is_sum_of_lines(self):
        cart = _make_cart()
        cart.add_item(_product("prod-001", price="10.50"), 2)
        cart.add_item(_product("prod-002", price="3.33"), 3)
        assert cart.total_price == Decimal("30.99")
        assert cart.item_count == 2

    def test_total_follows_every_mutation(self):
        cart = _make_cart()
        cart.add_item(_product("prod-001", price="10.00"), 1)
        cart.add_item(_product("prod-002", price="5.00"), 1)
        cart.update_item_quantity(cart.items[0].id, 3, stock=10)
        assert cart.total_price == Decimal("35.00")

        cart.remove_item(cart.items[1].id)
        assert cart.total_price == Decimal("30.00")

        cart.clear()
        assert cart.total_price == Decimal("0.00")

    def test_total_price_cannot_be_assigned(self):
        cart = _make_cart()
        with pytest.raises((AttributeError, ValueError)):
            cart.total_price = Decimal("1.00")


class TestUpdateQuantity:
    def test_update_quantity(self):
        cart = _make_cart()
        cart.add_item(_product(), 1)
        cart.update_item_quantity(cart.items[0].id, 5, stock=10)
        assert cart.items[0].quantity == 5

    def test_update_unknown_item(self):
        cart = _make_cart()
        with pytest.raises(NotFound, match="Item not found in cart"):
            cart.update_item_quantity("missing", 1, stock=10)

    def test_update_to_zero_is_rejected(self):
        cart = _make_cart()
        cart.add_item(_product(), 2)
        with pytest.raises(pydantic.ValidationError):
            cart.update_item_quantity(cart.items[0].id, 0, stock=10)
        assert cart.items[0].quantity == 2

    def test_update_beyond_stock_is_rejected(self):
        cart = _make_cart()
        cart.add_item(_product(), 2)
        with pytest.raises(InsufficientStock):
            cart.update_item_quantity(cart.items[0].id, 11, stock=10)
        assert cart.items[0].quantity == 2


class TestRemoveAndClear:
    def test_remove_item(self):
        cart = _make_cart()
        cart.add_item(_product("prod-001"), 1)
        cart.add_item(_product("prod-002"), 1)
        cart.remove_item(cart.items[0].id)
        assert [i.product_id for i in cart.items] == ["prod-002"]

    def test_remove_unknown_item_leaves_items_unchanged(self):
        cart = _make_cart()
        cart.add_item(_product(), 1)
        cart.remove_item("missing")
        assert len(cart.items) == 1

    def test_clear(self):
        cart = _make_cart()
        cart.add_item(_product(), 1)
        cart.clear()
        assert cart.is_empty


class TestActivity:
    def test_every_mutation_refreshes_last_active(self):
        with freeze_time("2026-01-01 10:00:00"):
            cart = _make_cart()
        with freeze_time("2026-01-01 11:00:00"):
            cart.add_item(_product(), 1)
        assert cart.last_active == datetime(2026, 1, 1, 11, 0, 0)

        with freeze_time("2026-01-01 12:00:00"):
            cart.update_item_quantity(cart.items[0].id, 2, stock=10)
        assert cart.last_active == datetime(2026, 1, 1, 12, 0, 0)

        with freeze_time("2026-01-01 13:00:00"):
            cart.clear()
        assert cart.last_active == datetime(2026, 1, 1, 13, 0, 0)


class TestAbandonment:
    def test_recover_clears_flag_and_refreshes_activity(self):
        cart = _make_cart().model_copy(update={"is_abandoned": True, "abandoned_at": datetime(2026, 1, 2, 9, 0, 0)})
        with freeze_time("2026-01-03 09:00:00"):
            cart.recover()
        assert not cart.is_abandoned
        assert cart.last_active == datetime(2026, 1, 3, 9, 0, 0)

    def test_recover_requires_abandoned_cart(self):
        cart = _make_cart()
        with pytest.raises(NotAbandoned):
            cart.recover()
