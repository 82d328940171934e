"""Tests for checkout draft pricing."""

from decimal import Decimal

import pytest

from storefront.catalogue.product.lookup import ProductSnapshot
from storefront.ordering.cart.cart import Cart
from storefront.ordering.cart.draft import CheckoutDraft, shipping_for

ADDRESS = {"street": "1 Main St", "city": "Springfield", "zip_code": "12345", "country": "US"}


def _cart_with(*lines):
    cart = Cart.create(user_id="user-001")
    for index, (price, quantity) in enumerate(lines):
        product = ProductSnapshot(
            id=f"prod-{index}",
            name=f"Product {index}",
            price=Decimal(price),
            discount_price=None,
            stock=100,
            images=(),
        )
        cart.add_item(product, quantity)
    return cart


class TestDraftPricing:
    def test_small_order_pays_flat_shipping(self):
        draft = CheckoutDraft.from_cart(_cart_with(("25.00", 2)), ADDRESS, "card")
        assert draft.items_price == Decimal("50.00")
        assert draft.tax_price == Decimal("7.50")
        assert draft.shipping_price == Decimal("10.00")
        assert draft.total_price == Decimal("67.50")

    def test_large_order_ships_free(self):
        draft = CheckoutDraft.from_cart(_cart_with(("100.00", 1), ("50.00", 1)), ADDRESS, "card")
        assert draft.items_price == Decimal("150.00")
        assert draft.tax_price == Decimal("22.50")
        assert draft.shipping_price == Decimal("0")
        assert draft.total_price == Decimal("172.50")

    @pytest.mark.parametrize(
        "items_price, expected",
        [("100.00", "10.00"), ("100.01", "0"), ("99.99", "10.00")],
    )
    def test_free_shipping_threshold_is_strict(self, items_price, expected):
        assert shipping_for(Decimal(items_price)) == Decimal(expected)

    def test_tax_is_rounded_half_up(self):
        draft = CheckoutDraft.from_cart(_cart_with(("0.10", 1)), ADDRESS, "card")
        # 0.10 * 0.15 = 0.015
        assert draft.tax_price == Decimal("0.02")


class TestDraftContents:
    def test_draft_snapshots_items_and_inputs(self):
        cart = _cart_with(("25.00", 2), ("5.00", 1))
        draft = CheckoutDraft.from_cart(cart, ADDRESS, "paypal")

        assert draft.user_id == "user-001"
        assert [(i.product_id, i.quantity, i.unit_price) for i in draft.order_items] == [
            ("prod-0", 2, Decimal("25.00")),
            ("prod-1", 1, Decimal("5.00")),
        ]
        assert draft.shipping_address == ADDRESS
        assert draft.payment_method == "paypal"
        assert draft.metadata["cart_id"] == cart.id

    def test_draft_is_detached_from_cart(self):
        cart = _cart_with(("25.00", 2))
        draft = CheckoutDraft.from_cart(cart, ADDRESS, "card")
        cart.clear()
        assert len(draft.order_items) == 1
