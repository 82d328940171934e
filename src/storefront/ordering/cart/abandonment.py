"""Cart abandonment: flag idle carts, report on them, and recover them.

Designed to be triggered periodically by an external scheduler (cron) through
``manage.py mark-abandoned`` or the admin endpoint. Flagging is a single bulk
update, so running it again only touches carts that went idle since.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from pydantic import Field

from storefront.identity.user.user import User, UserRepository
from storefront.notifications.channel import dispatch_email
from storefront.ordering.cart.cart import Cart
from storefront.ordering.cart.repository import CartRepository
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.exceptions import NotAbandoned, NotFound
from storefront.shared.logging import get_logger
from storefront.shared.money import ZERO, to_money

logger = get_logger(__name__)

DEFAULT_IDLE_HOURS = 24
RECENT_WINDOW = timedelta(hours=24)


def _naive_utc(moment: datetime | None) -> datetime:
    moment = moment or datetime.now(UTC)
    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return moment.replace(tzinfo=None)


class MarkAbandonedCarts(Command):
    """Flag non-empty carts idle beyond the threshold."""

    idle_threshold_hours: int = Field(DEFAULT_IDLE_HOURS, ge=0)
    as_of: datetime | None = None


class RecoverCart(Command):
    cart_id: str


@dataclass
class AbandonedCart:
    cart: Cart
    owner: User | None


@dataclass
class Recovery:
    cart: Cart
    email: str


@dataclass(frozen=True)
class AbandonmentStats:
    total_abandoned: int
    abandoned_last_24_hours: int
    total_value: Decimal
    average_value: Decimal


class AbandonmentHandler:
    def __init__(self, store: Store, client_url: str = "") -> None:
        self.carts = CartRepository(store)
        self.users = UserRepository(store)
        self.client_url = client_url.rstrip("/")

    def mark_abandoned(self, command: MarkAbandonedCarts) -> int:
        now = _naive_utc(command.as_of)
        cutoff = now - timedelta(hours=command.idle_threshold_hours)
        logger.info(
            "Checking for abandoned carts",
            cutoff=cutoff.isoformat(),
            threshold_hours=command.idle_threshold_hours,
        )

        modified = self.carts.mark_abandoned(idle_since=cutoff, now=now)
        logger.info("Cart abandonment detection complete", abandoned_count=modified)
        return modified

    def list_abandoned(self) -> list[AbandonedCart]:
        carts = self.carts.abandoned()
        owner_ids = list({cart.user_id for cart in carts})
        owners = {user.id: user for user in self.users.find({"_id": {"$in": owner_ids}})} if owner_ids else {}
        return [AbandonedCart(cart=cart, owner=owners.get(cart.user_id)) for cart in carts]

    def recover(self, command: RecoverCart) -> Recovery:
        cart = self.carts.get_or_none(command.cart_id)
        if cart is None:
            raise NotFound("Cart not found")
        if not cart.is_abandoned:
            raise NotAbandoned("This cart is not marked as abandoned")

        user = self.users.get_or_none(cart.user_id)
        if user is None:
            raise NotFound("User not found")

        cart.recover()
        self.carts.add(cart)

        dispatch_email(
            to=user.email,
            subject="You left something in your cart",
            body=self._reminder_body(user, cart),
        )
        logger.info("Abandoned cart recovered", cart_id=cart.id, user_id=user.id)
        return Recovery(cart=cart, email=user.email)

    def _reminder_body(self, user: User, cart: Cart) -> str:
        lines = [f"Hi {user.name},", "", "Your cart is still waiting for you:", ""]
        lines += [f"  {item.quantity} x {item.name} ({item.unit_price})" for item in cart.items]
        lines += ["", f"Total: {cart.total_price}", "", f"Complete your order: {self.client_url}/cart"]
        return "\n".join(lines)

    def stats(self, as_of: datetime | None = None) -> AbandonmentStats:
        now = _naive_utc(as_of)
        totals = self.carts.abandoned_totals()
        average = to_money(totals.value / totals.count) if totals.count else ZERO
        return AbandonmentStats(
            total_abandoned=totals.count,
            abandoned_last_24_hours=self.carts.count_abandoned_since(now - RECENT_WINDOW),
            total_value=totals.value,
            average_value=average,
        )
