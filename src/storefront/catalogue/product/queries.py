"""Product read side: listings, showcases and search.

Every query is scoped by ``visibility_filter`` so that anonymous callers and
customers never see inactive products.
"""

import re
from collections.abc import Mapping

import pymongo

from storefront.catalogue.product.product import Product, ProductRepository
from storefront.shared.auth import Actor, is_visible_to, visibility_filter
from storefront.shared.db import Store
from storefront.shared.exceptions import NotFound, ValidationError
from storefront.shared.listing import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    ListingPage,
    ListingQuery,
    as_bool,
    as_money,
    paginate,
    parse_listing,
    positive_int,
)

TOP_RATED_LIMIT = 5
SHOWCASE_LIMIT = 8

FILTERABLE = {
    "name": str,
    "price": as_money,
    "discount_price": as_money,
    "stock": int,
    "ratings": float,
    "num_reviews": int,
    "category_id": str,
    "brand_id": str,
    "featured": as_bool,
    "is_best_seller": as_bool,
    "is_new_arrival": as_bool,
    "is_active": as_bool,
    "tags": str,
}


class ProductQueries:
    def __init__(self, store: Store) -> None:
        self.products = ProductRepository(store)

    def list_products(self, actor: Actor, params: Mapping[str, str]) -> ListingPage:
        listing = parse_listing(params, FILTERABLE)
        return paginate(self.products, listing, scope=visibility_filter(actor, Product))

    def get_product(self, actor: Actor, product_id: str) -> Product:
        product = self.products.get(product_id)
        if not is_visible_to(actor, product):
            raise NotFound("Product not found")
        return product

    def _showcase(self, actor: Actor, filters: dict, sort: list, limit: int) -> list[Product]:
        scoped = {**filters, **visibility_filter(actor, Product)}
        return self.products.find(scoped, sort=sort, limit=limit)

    def top_rated(self, actor: Actor) -> list[Product]:
        return self._showcase(actor, {}, [("ratings", pymongo.DESCENDING)], TOP_RATED_LIMIT)

    def featured(self, actor: Actor) -> list[Product]:
        return self._showcase(actor, {"featured": True}, [("created_at", pymongo.DESCENDING)], SHOWCASE_LIMIT)

    def best_sellers(self, actor: Actor) -> list[Product]:
        return self._showcase(actor, {"is_best_seller": True}, [("created_at", pymongo.DESCENDING)], SHOWCASE_LIMIT)

    def new_arrivals(self, actor: Actor) -> list[Product]:
        return self._showcase(actor, {"is_new_arrival": True}, [("created_at", pymongo.DESCENDING)], SHOWCASE_LIMIT)

    def search(self, actor: Actor, params: Mapping[str, str]) -> ListingPage:
        """Fallback search: phrase on name, then phrase on description or tags,
        then any single word on name, description or tags."""
        term = (params.get("q") or params.get("search") or "").strip()
        if not term:
            raise ValidationError({"q": ["Please provide a search term"]})

        listing = ListingQuery(
            page=positive_int(params, "page", 1),
            limit=min(positive_int(params, "limit", DEFAULT_LIMIT), MAX_LIMIT),
        )
        listing.sort = [("created_at", pymongo.DESCENDING)]
        scope = visibility_filter(actor, Product)

        phrase = re.compile(re.escape(term), re.IGNORECASE)
        words = [re.compile(re.escape(word), re.IGNORECASE) for word in term.split()]
        attempts = [
            {"name": phrase},
            {"$or": [{"description": phrase}, {"tags": phrase}]},
            {"$or": [{field: word} for word in words for field in ("name", "description", "tags")]},
        ]

        page = ListingPage(items=[], total=0, page=listing.page, limit=listing.limit)
        for filters in attempts:
            listing.filters = filters
            page = paginate(self.products, listing, scope=scope)
            if page.total:
                break
        return page

