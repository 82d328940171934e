"""Aggregate and command base classes, and the repository over a MongoDB collection."""

from datetime import UTC, datetime
from typing import Any, ClassVar, Generic, TypeVar
from uuid import uuid4

import pydantic
from pydantic import BaseModel, ConfigDict, Field
from pymongo.errors import DuplicateKeyError

from storefront.shared.db import Store
from storefront.shared.exceptions import Conflict, NotFound, StorefrontError, ValidationError, field_errors
from storefront.shared.money import from_minor_units, to_minor_units


def utcnow() -> datetime:
    """Naive UTC timestamp, the form MongoDB hands back."""
    return datetime.now(UTC).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid4())


class Aggregate(BaseModel):
    """Root of a consistency boundary, persisted as one document."""

    model_config = ConfigDict(validate_assignment=True)

    # Fields every document filter may be checked against for a non-admin actor
    VISIBILITY: ClassVar[dict[str, Any]] = {}

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def touch(self) -> None:
        self.updated_at = utcnow()


class Command(BaseModel):
    """An immutable request to a handler, validated when it is built.

    A value outside its field constraints raises ``ValidationError`` from the
    error taxonomy. Subclasses override ``rejected`` to raise a more specific
    error for particular fields.
    """

    model_config = ConfigDict(frozen=True)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except pydantic.ValidationError as exc:
            raise self.rejected(exc) from exc

    @classmethod
    def rejected(cls, exc: pydantic.ValidationError) -> StorefrontError:
        return ValidationError(field_errors(exc.errors()))


T = TypeVar("T", bound=Aggregate)


class Repository(Generic[T]):
    """Maps one aggregate type to one collection.

    Money fields are stored as integer cents; ``_id`` holds the aggregate id.
    """

    collection_name: ClassVar[str]
    aggregate: ClassVar[type[Aggregate]]
    money_fields: ClassVar[tuple[str, ...]] = ()
    not_found_message: ClassVar[str] = "Resource not found"

    def __init__(self, store: Store) -> None:
        self.store = store
        self.collection = store.collection(self.collection_name)

    # -------------------------------------------------------------------
    # Mapping
    # -------------------------------------------------------------------
    def to_document(self, obj: T) -> dict:
        doc = obj.model_dump(exclude={"id"})
        for field in self.money_fields:
            doc[field] = to_minor_units(doc.get(field))
        doc["_id"] = obj.id
        return doc

    def from_document(self, doc: dict) -> T:
        data = dict(doc)
        data["id"] = data.pop("_id")
        for field in self.money_fields:
            data[field] = from_minor_units(data.get(field))
        return self.aggregate.model_validate(data)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get(self, identifier: str) -> T:
        doc = self.collection.find_one({"_id": identifier})
        if doc is None:
            raise NotFound(self.not_found_message)
        return self.from_document(doc)

    def get_or_none(self, identifier: str) -> T | None:
        doc = self.collection.find_one({"_id": identifier})
        return self.from_document(doc) if doc is not None else None

    def find_one(self, filters: dict) -> T | None:
        doc = self.collection.find_one(filters)
        return self.from_document(doc) if doc is not None else None

    def find(
        self,
        filters: dict | None = None,
        sort: list[tuple[str, int]] | None = None,
        skip: int = 0,
        limit: int = 0,
    ) -> list[T]:
        cursor = self.collection.find(filters or {})
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [self.from_document(doc) for doc in cursor]

    def count(self, filters: dict | None = None) -> int:
        return self.collection.count_documents(filters or {})

    def exists(self, filters: dict) -> bool:
        return self.collection.count_documents(filters, limit=1) > 0

    # -------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------
    def add(self, obj: T) -> T:
        try:
            self.collection.replace_one({"_id": obj.id}, self.to_document(obj), upsert=True)
        except DuplicateKeyError as exc:
            raise Conflict("Duplicate field value entered. Please use another value") from exc
        return obj

    def delete(self, obj: T) -> None:
        self.collection.delete_one({"_id": obj.id})
