"""Application tests for AbandonmentHandler: the idle-cart sweep, report and recovery.

Covers:
- Idle non-empty carts are flagged; empty and recently active carts are not
- Re-running the sweep only touches carts that went idle since
- Recovery requires an abandoned cart and emails its owner
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from freezegun import freeze_time

from storefront.ordering.cart.abandonment import AbandonmentHandler, MarkAbandonedCarts, RecoverCart
from storefront.ordering.cart.items import AddToCart, ManageCartItemsHandler
from storefront.ordering.cart.repository import CartRepository
from storefront.shared.exceptions import NotAbandoned, NotFound, ValidationError

START = datetime(2026, 3, 1, 12, 0, 0)


@pytest.fixture()
def handler(store, settings):
    return AbandonmentHandler(store, client_url=settings.client_url)


def _cart_with_item(store, user_id, product, at=START, quantity=1):
    with freeze_time(at):
        return ManageCartItemsHandler(store).add_to_cart(
            AddToCart(user_id=user_id, product_id=product.id, quantity=quantity)
        )


def _empty_cart(store, user_id, at=START):
    with freeze_time(at):
        return ManageCartItemsHandler(store).get_cart(user_id)


class TestMarkAbandoned:
    def test_idle_cart_with_items_is_flagged(self, handler, store, make_product):
        cart = _cart_with_item(store, "user-1", make_product())
        as_of = START + timedelta(hours=25)

        modified = handler.mark_abandoned(MarkAbandonedCarts(idle_threshold_hours=24, as_of=as_of))

        assert modified == 1
        saved = CartRepository(store).get(cart.id)
        assert saved.is_abandoned
        assert saved.abandoned_at == as_of

    def test_empty_cart_is_never_flagged(self, handler, store):
        _empty_cart(store, "user-1")
        modified = handler.mark_abandoned(
            MarkAbandonedCarts(idle_threshold_hours=24, as_of=START + timedelta(days=30))
        )
        assert modified == 0

    def test_recently_active_cart_is_not_flagged(self, handler, store, make_product):
        _cart_with_item(store, "user-1", make_product())
        modified = handler.mark_abandoned(
            MarkAbandonedCarts(idle_threshold_hours=24, as_of=START + timedelta(hours=23))
        )
        assert modified == 0

    def test_sweep_is_idempotent(self, handler, store, make_product):
        cart = _cart_with_item(store, "user-1", make_product())
        first_run = START + timedelta(hours=25)
        handler.mark_abandoned(MarkAbandonedCarts(idle_threshold_hours=24, as_of=first_run))

        modified = handler.mark_abandoned(
            MarkAbandonedCarts(idle_threshold_hours=24, as_of=first_run + timedelta(hours=5))
        )

        assert modified == 0
        assert CartRepository(store).get(cart.id).abandoned_at == first_run

    def test_only_newly_idle_carts_are_flagged_on_rerun(self, handler, store, make_product):
        product = make_product()
        _cart_with_item(store, "user-1", product, at=START)
        _cart_with_item(store, "user-2", product, at=START + timedelta(hours=10))

        assert handler.mark_abandoned(
            MarkAbandonedCarts(idle_threshold_hours=24, as_of=START + timedelta(hours=25))
        ) == 1
        assert handler.mark_abandoned(
            MarkAbandonedCarts(idle_threshold_hours=24, as_of=START + timedelta(hours=35))
        ) == 1

    def test_sweep_invalidates_stale_copies(self, handler, store, make_product):
        from storefront.shared.exceptions import ConcurrentModification

        cart = _cart_with_item(store, "user-1", make_product())
        stale = CartRepository(store).get(cart.id)
        handler.mark_abandoned(MarkAbandonedCarts(idle_threshold_hours=24, as_of=START + timedelta(hours=25)))

        stale.clear()
        with pytest.raises(ConcurrentModification):
            CartRepository(store).add(stale)

    def test_timezone_aware_as_of_is_accepted(self, handler, store, make_product):
        _cart_with_item(store, "user-1", make_product())
        as_of = (START + timedelta(hours=25)).replace(tzinfo=UTC)
        assert handler.mark_abandoned(MarkAbandonedCarts(idle_threshold_hours=24, as_of=as_of)) == 1

    def test_negative_threshold_is_rejected(self, handler):
        with pytest.raises(ValidationError):
            handler.mark_abandoned(MarkAbandonedCarts(idle_threshold_hours=-1))


class TestListAndStats:
    def test_list_abandoned_includes_owner(self, handler, store, make_product, customer):
        _cart_with_item(store, customer.user.id, make_product())
        handler.mark_abandoned(MarkAbandonedCarts(idle_threshold_hours=24, as_of=START + timedelta(hours=25)))

        entries = handler.list_abandoned()

        assert len(entries) == 1
        assert entries[0].owner.email == customer.user.email

    def test_stats(self, handler, store, make_product):
        product = make_product(price="20.00")
        _cart_with_item(store, "user-1", product, quantity=1)
        _cart_with_item(store, "user-2", product, quantity=2)
        sweep_at = START + timedelta(hours=25)
        handler.mark_abandoned(MarkAbandonedCarts(idle_threshold_hours=24, as_of=sweep_at))

        stats = handler.stats(as_of=sweep_at + timedelta(hours=1))

        assert stats.total_abandoned == 2
        assert stats.abandoned_last_24_hours == 2
        assert stats.total_value == Decimal("60.00")
        assert stats.average_value == Decimal("30.00")

    def test_stats_recent_window(self, handler, store, make_product):
        _cart_with_item(store, "user-1", make_product())
        sweep_at = START + timedelta(hours=25)
        handler.mark_abandoned(MarkAbandonedCarts(idle_threshold_hours=24, as_of=sweep_at))

        stats = handler.stats(as_of=sweep_at + timedelta(hours=48))

        assert stats.total_abandoned == 1
        assert stats.abandoned_last_24_hours == 0

    def test_stats_without_abandoned_carts(self, handler):
        stats = handler.stats()
        assert stats.total_abandoned == 0
        assert stats.total_value == Decimal("0.00")
        assert stats.average_value == Decimal("0.00")


class TestRecover:
    def test_recover_clears_flag_and_emails_owner(self, handler, store, make_product, customer, emails):
        cart = _cart_with_item(store, customer.user.id, make_product(name="Diver"))
        handler.mark_abandoned(MarkAbandonedCarts(idle_threshold_hours=24, as_of=START + timedelta(hours=25)))

        recovery = handler.recover(RecoverCart(cart_id=cart.id))

        assert recovery.email == customer.user.email
        assert not CartRepository(store).get(cart.id).is_abandoned
        sent = emails.sent_to(customer.user.email)
        assert len(sent) == 1
        assert "Diver" in sent[0]["body"]
        assert "https://shop.example.com/cart" in sent[0]["body"]

    def test_recover_active_cart(self, handler, store, make_product, customer, emails):
        cart = _cart_with_item(store, customer.user.id, make_product())
        before = CartRepository(store).get(cart.id)

        with freeze_time(START + timedelta(hours=1)):
            with pytest.raises(NotAbandoned, match="This cart is not marked as abandoned"):
                handler.recover(RecoverCart(cart_id=cart.id))

        after = CartRepository(store).get(cart.id)
        assert after.revision == before.revision
        assert after.last_active == before.last_active == START
        assert emails.sent_to(customer.user.email) == []

    def test_recover_unknown_cart(self, handler):
        with pytest.raises(NotFound, match="Cart not found"):
            handler.recover(RecoverCart(cart_id="missing"))

    def test_recover_cart_of_deleted_user(self, handler, store, make_product):
        cart = _cart_with_item(store, "ghost-user", make_product())
        handler.mark_abandoned(MarkAbandonedCarts(idle_threshold_hours=24, as_of=START + timedelta(hours=25)))
        with pytest.raises(NotFound, match="User not found"):
            handler.recover(RecoverCart(cart_id=cart.id))

    def test_recovered_cart_is_not_reflagged_until_idle_again(self, handler, store, make_product, customer):
        cart = _cart_with_item(store, customer.user.id, make_product())
        handler.mark_abandoned(MarkAbandonedCarts(idle_threshold_hours=24, as_of=START + timedelta(hours=25)))

        with freeze_time(START + timedelta(hours=26)):
            handler.recover(RecoverCart(cart_id=cart.id))

        assert handler.mark_abandoned(
            MarkAbandonedCarts(idle_threshold_hours=24, as_of=START + timedelta(hours=30))
        ) == 0
        assert handler.mark_abandoned(
            MarkAbandonedCarts(idle_threshold_hours=24, as_of=START + timedelta(hours=51))
        ) == 1
