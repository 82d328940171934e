"""Shopping cart aggregate: one per user, converted to a draft at checkout.

The cart owns an ordered list of line items. Each line carries a snapshot of
the product's name, image and unit price taken when it was first added; later
catalogue changes never reach an existing line.

``total_price`` is derived from the items and cannot be assigned. ``revision``
counts successful saves and backs the repository's compare-and-swap. Carts are
flagged abandoned only in bulk, by ``CartRepository.mark_abandoned``.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from storefront.catalogue.product.lookup import ProductSnapshot
from storefront.shared.domain import Aggregate, new_id, utcnow
from storefront.shared.exceptions import InsufficientStock, NotAbandoned, NotFound, OutOfStock
from storefront.shared.money import ZERO, to_money


class CartItem(BaseModel):
    id: str = Field(default_factory=new_id)
    product_id: str
    name: str
    image: str = ""
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)

    @field_validator("unit_price")
    @classmethod
    def _quantize(cls, value: Decimal) -> Decimal:
        return to_money(value)

    @property
    def line_total(self) -> Decimal:
        return to_money(self.unit_price * self.quantity)

    def with_quantity(self, quantity: int) -> "CartItem":
        return CartItem.model_validate({**self.model_dump(), "quantity": quantity})


class Cart(Aggregate):
    """Shopping cart aggregate root."""

    user_id: str
    items: list[CartItem] = Field(default_factory=list)
    last_active: datetime = Field(default_factory=utcnow)
    is_abandoned: bool = False
    abandoned_at: datetime | None = None
    revision: int = Field(default=0, ge=0)

    @classmethod
    def create(cls, user_id: str) -> "Cart":
        now = utcnow()
        return cls(user_id=user_id, last_active=now, created_at=now, updated_at=now)

    @property
    def total_price(self) -> Decimal:
        return to_money(sum((item.line_total for item in self.items), ZERO))

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, item_id: str) -> CartItem:
        item = next((i for i in self.items if i.id == item_id), None)
        if item is None:
            raise NotFound("Item not found in cart")
        return item

    def _find_by_product(self, product_id: str) -> CartItem | None:
        return next((i for i in self.items if i.product_id == product_id), None)

    def _record_activity(self) -> None:
        now = utcnow()
        self.last_active = now
        self.updated_at = now

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product: ProductSnapshot, quantity: int = 1) -> CartItem:
        """Add ``quantity`` units of ``product``, merging with an existing line.

        All checks run before anything changes, so a rejected add leaves the
        cart exactly as it was. Lines are rebuilt through validation, so no
        line ever holds fewer than one unit.
        """
        if product.stock < quantity:
            raise OutOfStock("Product is out of stock or has insufficient quantity")

        existing = self._find_by_product(product.id)
        if existing is not None:
            new_quantity = existing.quantity + quantity
            if new_quantity > product.stock:
                raise InsufficientStock(f"Cannot add more than {product.stock} units of this product")
            line = existing.with_quantity(new_quantity)
            self.items = [line if i.id == existing.id else i for i in self.items]
        else:
            line = CartItem(
                product_id=product.id,
                name=product.name,
                image=product.primary_image,
                unit_price=product.unit_price,
                quantity=quantity,
            )
            self.items = [*self.items, line]

        self._record_activity()
        return line

    def update_item_quantity(self, item_id: str, quantity: int, stock: int) -> CartItem:
        item = self.find_item(item_id)
        if quantity > stock:
            raise InsufficientStock(f"Cannot add more than {stock} units of this product")

        line = item.with_quantity(quantity)
        self.items = [line if i.id == item_id else i for i in self.items]
        self._record_activity()
        return line

    def remove_item(self, item_id: str) -> None:
        """Drop the line with ``item_id``; unknown ids leave the items as they are."""
        self.items = [i for i in self.items if i.id != item_id]
        self._record_activity()

    def clear(self) -> None:
        self.items = []
        self._record_activity()

    # -------------------------------------------------------------------
    # Abandonment lifecycle
    # -------------------------------------------------------------------
    def recover(self) -> None:
        if not self.is_abandoned:
            raise NotAbandoned("This cart is not marked as abandoned")
        self.is_abandoned = False
        self._record_activity()
