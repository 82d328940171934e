"""Application tests for CheckoutHandler."""

from decimal import Decimal

import pytest

from storefront.catalogue.product.product import ProductRepository
from storefront.ordering.cart.checkout import CheckoutCart, CheckoutHandler
from storefront.ordering.cart.items import AddToCart, ManageCartItemsHandler
from storefront.ordering.cart.repository import CartRepository
from storefront.shared.exceptions import (
    EmptyCart,
    InsufficientStock,
    MissingField,
    OrderCreationFailed,
    ProductGone,
)

USER_ID = "user-checkout-001"
ADDRESS = {"street": "1 Main St", "city": "Springfield", "zip_code": "12345", "country": "US"}


@pytest.fixture()
def handler(store, orders):
    return CheckoutHandler(store, orders=orders)


def _fill_cart(store, *products_and_quantities):
    items = ManageCartItemsHandler(store)
    for product, quantity in products_and_quantities:
        items.add_to_cart(AddToCart(user_id=USER_ID, product_id=product.id, quantity=quantity))


def _checkout(**overrides):
    values = {"user_id": USER_ID, "shipping_address": ADDRESS, "payment_method": "card"}
    values.update(overrides)
    return CheckoutCart(**values)


class TestCheckoutValidation:
    @pytest.mark.parametrize(
        "overrides",
        [{"shipping_address": None}, {"payment_method": None}, {"payment_method": "  "}],
    )
    def test_requires_address_and_payment_method(self, handler, overrides):
        with pytest.raises(MissingField, match="Shipping address and payment method are required"):
            handler.checkout(_checkout(**overrides))

    def test_missing_cart_is_empty(self, handler):
        with pytest.raises(EmptyCart, match="Cart is empty"):
            handler.checkout(_checkout())

    def test_empty_cart(self, handler, store):
        ManageCartItemsHandler(store).get_cart(USER_ID)
        with pytest.raises(EmptyCart):
            handler.checkout(_checkout())

    def test_deleted_product_is_reported_by_name(self, handler, store, make_product):
        product = make_product(name="Vintage Chrono")
        _fill_cart(store, (product, 1))
        ProductRepository(store).delete(product)

        with pytest.raises(ProductGone, match="Product Vintage Chrono no longer exists"):
            handler.checkout(_checkout())

    def test_stock_drop_since_add_is_reported(self, handler, store, make_product):
        product = make_product(name="Pilot", stock=5)
        _fill_cart(store, (product, 4))
        product.update(stock=2)
        ProductRepository(store).add(product)

        with pytest.raises(InsufficientStock, match="Insufficient stock for Pilot"):
            handler.checkout(_checkout())


class TestCheckoutDraft:
    def test_draft_prices_cart(self, handler, store, make_product):
        _fill_cart(store, (make_product(price="25.00"), 2))
        result = handler.checkout(_checkout())

        assert result.draft.items_price == Decimal("50.00")
        assert result.draft.tax_price == Decimal("7.50")
        assert result.draft.shipping_price == Decimal("10.00")
        assert result.draft.total_price == Decimal("67.50")
        assert result.order_id is None

    def test_draft_only_checkout_keeps_cart_and_stock(self, handler, store, make_product, orders):
        product = make_product(stock=5)
        _fill_cart(store, (product, 2))
        handler.checkout(_checkout())

        assert len(CartRepository(store).get_for_user(USER_ID).items) == 1
        assert ProductRepository(store).get(product.id).stock == 5
        assert orders.drafts == []


class TestPlaceOrder:
    def test_placed_order_clears_cart(self, handler, store, make_product, orders):
        _fill_cart(store, (make_product(price="100.00"), 1), (make_product(name="Strap", price="50.00"), 1))
        result = handler.checkout(_checkout(place_order=True))

        assert result.order_id.startswith("fake_order_")
        assert len(orders.drafts) == 1
        assert orders.drafts[0].total_price == Decimal("172.50")
        assert CartRepository(store).get_for_user(USER_ID).is_empty

    def test_rejected_order_keeps_cart(self, handler, store, make_product, orders):
        orders.configure(should_succeed=False, failure_reason="Payment declined")
        _fill_cart(store, (make_product(), 1))

        with pytest.raises(OrderCreationFailed, match="Payment declined"):
            handler.checkout(_checkout(place_order=True))
        assert len(CartRepository(store).get_for_user(USER_ID).items) == 1

    def test_place_order_without_order_service(self, store, make_product):
        _fill_cart(store, (make_product(), 1))
        with pytest.raises(OrderCreationFailed):
            CheckoutHandler(store).checkout(_checkout(place_order=True))
