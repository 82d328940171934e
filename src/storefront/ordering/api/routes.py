"""FastAPI endpoints for the Ordering context.

Cart endpoints always act on the caller's own cart; the admin router exposes
the abandonment sweep, its report and recovery.
"""

from fastapi import APIRouter, Depends

from storefront.dependencies import admin_actor, current_actor, get_app_settings, get_store
from storefront.ordering.api.schemas import (
    AbandonedCartOut,
    AbandonmentStatsOut,
    AddToCartRequest,
    CartOut,
    CartOwnerOut,
    CheckoutDraftOut,
    CheckoutOut,
    CheckoutRequest,
    MarkAbandonedOut,
    MarkAbandonedRequest,
    UpdateCartItemRequest,
)
from storefront.ordering.cart.abandonment import (
    AbandonmentHandler,
    MarkAbandonedCarts,
    RecoverCart,
)
from storefront.ordering.cart.checkout import CheckoutCart, CheckoutHandler
from storefront.ordering.cart.items import (
    AddToCart,
    ClearCart,
    ManageCartItemsHandler,
    RemoveFromCart,
    UpdateCartQuantity,
)
from storefront.ordering.order import get_order_service
from storefront.shared.auth import Actor
from storefront.shared.config import Settings
from storefront.shared.db import Store
from storefront.shared.schemas import Envelope, ListEnvelope

cart_router = APIRouter(prefix="/cart", tags=["cart"])
admin_cart_router = APIRouter(prefix="/admin/carts", tags=["admin"])


# --- Cart endpoints ---


@cart_router.get("", response_model=Envelope[CartOut])
def get_cart(actor: Actor = Depends(current_actor), store: Store = Depends(get_store)) -> Envelope:
    cart = ManageCartItemsHandler(store).get_cart(actor.user_id)
    return Envelope(data=CartOut.model_validate(cart))


@cart_router.post("", response_model=Envelope[CartOut])
def add_to_cart(
    body: AddToCartRequest,
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    command = AddToCart(user_id=actor.user_id, product_id=body.product_id, quantity=body.quantity)
    cart = ManageCartItemsHandler(store).add_to_cart(command)
    return Envelope(message="Item added to cart", data=CartOut.model_validate(cart))


@cart_router.post("/checkout", response_model=Envelope[CheckoutOut])
def checkout(
    body: CheckoutRequest,
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    command = CheckoutCart(
        user_id=actor.user_id,
        shipping_address=body.shipping_address.model_dump() if body.shipping_address else None,
        payment_method=body.payment_method,
        place_order=body.place_order,
    )
    result = CheckoutHandler(store, orders=get_order_service()).checkout(command)
    data = CheckoutOut(
        order_data=CheckoutDraftOut.model_validate(result.draft),
        cart=CartOut.model_validate(result.cart),
        order_id=result.order_id,
    )
    message = "Order placed" if result.order_id else "Checkout successful"
    return Envelope(message=message, data=data)


@cart_router.put("/{item_id}", response_model=Envelope[CartOut])
def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    command = UpdateCartQuantity(user_id=actor.user_id, item_id=item_id, quantity=body.quantity)
    cart = ManageCartItemsHandler(store).update_cart_quantity(command)
    return Envelope(message="Cart updated", data=CartOut.model_validate(cart))


@cart_router.delete("/{item_id}", response_model=Envelope[CartOut])
def remove_cart_item(
    item_id: str,
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    cart = ManageCartItemsHandler(store).remove_from_cart(RemoveFromCart(user_id=actor.user_id, item_id=item_id))
    return Envelope(message="Item removed from cart", data=CartOut.model_validate(cart))


@cart_router.delete("", response_model=Envelope[CartOut])
def clear_cart(actor: Actor = Depends(current_actor), store: Store = Depends(get_store)) -> Envelope:
    cart = ManageCartItemsHandler(store).clear_cart(ClearCart(user_id=actor.user_id))
    return Envelope(message="Cart cleared", data=CartOut.model_validate(cart))


# --- Admin abandonment endpoints ---


@admin_cart_router.post("/mark-abandoned", response_model=Envelope[MarkAbandonedOut])
def mark_abandoned(
    body: MarkAbandonedRequest | None = None,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Envelope:
    hours = body.hours if body is not None and body.hours is not None else settings.abandonment_threshold_hours
    modified = AbandonmentHandler(store).mark_abandoned(MarkAbandonedCarts(idle_threshold_hours=hours))
    return Envelope(message=f"{modified} carts marked as abandoned", data=MarkAbandonedOut(modified_count=modified))


@admin_cart_router.get("/abandoned", response_model=ListEnvelope[AbandonedCartOut])
def list_abandoned(_: Actor = Depends(admin_actor), store: Store = Depends(get_store)) -> ListEnvelope:
    entries = AbandonmentHandler(store).list_abandoned()
    data = [
        AbandonedCartOut.model_validate(
            {
                **CartOut.model_validate(entry.cart).model_dump(),
                "owner": CartOwnerOut.model_validate(entry.owner) if entry.owner else None,
            }
        )
        for entry in entries
    ]
    return ListEnvelope(count=len(data), data=data)


@admin_cart_router.get("/abandoned/stats", response_model=Envelope[AbandonmentStatsOut])
def abandonment_stats(_: Actor = Depends(admin_actor), store: Store = Depends(get_store)) -> Envelope:
    stats = AbandonmentHandler(store).stats()
    return Envelope(data=AbandonmentStatsOut.model_validate(stats))


@admin_cart_router.post("/{cart_id}/recover", response_model=Envelope[CartOut])
def recover_cart(
    cart_id: str,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Envelope:
    recovery = AbandonmentHandler(store, client_url=settings.client_url).recover(RecoverCart(cart_id=cart_id))
    return Envelope(message=f"Recovery email sent to {recovery.email}", data=CartOut.model_validate(recovery.cart))
