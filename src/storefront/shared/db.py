"""Document store handle and schema (index) management.

A single ``Store`` owns the MongoDB client for the lifetime of the process.
It is built at startup, handed to every handler, and closed on shutdown.
"""

import pymongo
from pymongo import MongoClient
from pymongo.collection import Collection

from storefront.shared.config import Settings
from storefront.shared.logging import get_logger

logger = get_logger(__name__)

USERS = "users"
PRODUCTS = "products"
CATEGORIES = "categories"
BRANDS = "brands"
CARTS = "carts"
BLOGS = "blogs"
TESTIMONIALS = "testimonials"
CONTACTS = "contacts"
NEWSLETTERS = "newsletters"
FAQS = "faqs"
WARRANTIES = "warranties"

ALL_COLLECTIONS = (
    USERS,
    PRODUCTS,
    CATEGORIES,
    BRANDS,
    CARTS,
    BLOGS,
    TESTIMONIALS,
    CONTACTS,
    NEWSLETTERS,
    FAQS,
    WARRANTIES,
)

# (collection, keys, options)
_INDEXES = [
    (USERS, [("email", pymongo.ASCENDING)], {"unique": True}),
    (CARTS, [("user_id", pymongo.ASCENDING)], {"unique": True}),
    (CARTS, [("is_abandoned", pymongo.ASCENDING), ("last_active", pymongo.ASCENDING)], {}),
    (CATEGORIES, [("name", pymongo.ASCENDING)], {"unique": True}),
    (CATEGORIES, [("parent_id", pymongo.ASCENDING)], {}),
    (BRANDS, [("name", pymongo.ASCENDING)], {"unique": True}),
    (PRODUCTS, [("category_id", pymongo.ASCENDING)], {}),
    (PRODUCTS, [("brand_id", pymongo.ASCENDING)], {}),
    (NEWSLETTERS, [("email", pymongo.ASCENDING)], {"unique": True}),
    (NEWSLETTERS, [("unsubscribe_token", pymongo.ASCENDING)], {}),
    (WARRANTIES, [("serial_number", pymongo.ASCENDING)], {"unique": True}),
    (WARRANTIES, [("user_id", pymongo.ASCENDING)], {}),
]


class Store:
    """Explicit persistence context wrapping a MongoDB client and database."""

    def __init__(self, client: MongoClient, database_name: str) -> None:
        self.client = client
        self.db = client[database_name]
        self.database_name = database_name

    @classmethod
    def from_settings(cls, settings: Settings) -> "Store":
        client = MongoClient(settings.mongo_uri)
        return cls(client, settings.mongo_database)

    def collection(self, name: str) -> Collection:
        return self.db[name]

    def close(self) -> None:
        self.client.close()


def setup_db(store: Store) -> None:
    """Create collection indexes."""
    for collection, keys, options in _INDEXES:
        store.collection(collection).create_index(keys, **options)
    logger.info("Database indexes ready", database=store.database_name)


def drop_db(store: Store) -> None:
    """Drop every Storefront collection."""
    for name in ALL_COLLECTIONS:
        store.collection(name).drop()
    logger.info("Database collections dropped", database=store.database_name)
