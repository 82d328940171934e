"""Cart persistence: compare-and-swap saves and the bulk abandonment update."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from pymongo.errors import DuplicateKeyError

from storefront.ordering.cart.cart import Cart
from storefront.shared.db import CARTS
from storefront.shared.domain import Repository
from storefront.shared.exceptions import ConcurrentModification, NotFound
from storefront.shared.money import ZERO, from_minor_units, to_minor_units


@dataclass(frozen=True)
class AbandonedTotals:
    count: int
    value: Decimal


class CartRepository(Repository[Cart]):
    """Stores carts with integer-cent prices.

    ``total_price`` and ``item_count`` are written alongside the items so that
    queries can filter and aggregate without loading carts; they are recomputed
    on every save and ignored on load.
    """

    collection_name = CARTS
    aggregate = Cart
    not_found_message = "Cart not found"

    def to_document(self, obj: Cart) -> dict:
        doc = super().to_document(obj)
        for item in doc["items"]:
            item["unit_price"] = to_minor_units(item["unit_price"])
        doc["total_price"] = to_minor_units(obj.total_price)
        doc["item_count"] = obj.item_count
        return doc

    def from_document(self, doc: dict) -> Cart:
        data = {key: value for key, value in doc.items() if key not in ("total_price", "item_count")}
        data["items"] = [{**item, "unit_price": from_minor_units(item["unit_price"])} for item in doc.get("items", [])]
        return super().from_document(data)

    def get_for_user(self, user_id: str) -> Cart:
        cart = self.find_one({"user_id": user_id})
        if cart is None:
            raise NotFound("Cart not found")
        return cart

    def add(self, obj: Cart) -> Cart:
        """Save ``obj`` only if nobody else saved it since it was loaded."""
        expected = obj.revision
        doc = self.to_document(obj)
        doc["revision"] = expected + 1

        if expected == 0:
            try:
                self.collection.insert_one(doc)
            except DuplicateKeyError as exc:
                raise ConcurrentModification("Cart was modified concurrently. Please retry") from exc
        else:
            result = self.collection.replace_one({"_id": obj.id, "revision": expected}, doc)
            if result.matched_count == 0:
                raise ConcurrentModification("Cart was modified concurrently. Please retry")

        obj.revision = expected + 1
        return obj

    # -------------------------------------------------------------------
    # Abandonment
    # -------------------------------------------------------------------
    def mark_abandoned(self, idle_since: datetime, now: datetime) -> int:
        """Flag every non-empty, not yet abandoned cart idle since before ``idle_since``."""
        result = self.collection.update_many(
            {
                "item_count": {"$gt": 0},
                "is_abandoned": False,
                "last_active": {"$lt": idle_since},
            },
            {
                "$set": {"is_abandoned": True, "abandoned_at": now, "updated_at": now},
                "$inc": {"revision": 1},
            },
        )
        return result.modified_count

    def abandoned(self) -> list[Cart]:
        return self.find({"is_abandoned": True}, sort=[("abandoned_at", -1)])

    def count_abandoned_since(self, since: datetime) -> int:
        return self.count({"is_abandoned": True, "abandoned_at": {"$gte": since}})

    def abandoned_totals(self) -> AbandonedTotals:
        count = 0
        cents = 0
        for doc in self.collection.find({"is_abandoned": True}, {"total_price": 1}):
            count += 1
            cents += doc.get("total_price") or 0
        return AbandonedTotals(count=count, value=from_minor_units(cents) if count else ZERO)
