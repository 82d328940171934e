"""Query-string driven listing: filtering, sorting and pagination.

``?price[gte]=10&featured=true&sort=-price,name&page=2&limit=20``

Filterable fields are declared per resource as ``{name: converter}``; any
other key is rejected.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import pymongo

from storefront.shared.domain import Repository
from storefront.shared.exceptions import ValidationError
from storefront.shared.money import to_minor_units, to_money

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
RESERVED_PARAMS = frozenset({"select", "sort", "page", "limit", "search", "q"})
OPERATORS = {"gt": "$gt", "gte": "$gte", "lt": "$lt", "lte": "$lte", "in": "$in", "ne": "$ne"}

_KEY_PATTERN = re.compile(r"^(?P<field>[a-z_][a-z0-9_]*)(?:\[(?P<op>[a-z]+)\])?$")


def as_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValueError(f"'{value}' is not a boolean")


def as_money(value: str) -> int:
    return to_minor_units(to_money(value))


@dataclass
class ListingQuery:
    filters: dict[str, Any] = field(default_factory=dict)
    sort: list[tuple[str, int]] = field(default_factory=list)
    page: int = 1
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class ListingPage:
    items: list
    total: int
    page: int
    limit: int

    @property
    def pagination(self) -> dict:
        result = {}
        if self.page * self.limit < self.total:
            result["next"] = {"page": self.page + 1, "limit": self.limit}
        if self.page > 1:
            result["prev"] = {"page": self.page - 1, "limit": self.limit}
        return result


def positive_int(params: Mapping[str, str], name: str, default: int) -> int:
    raw = params.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError({name: [f"'{raw}' is not an integer"]}) from None
    return value if value >= 1 else default


def parse_listing(
    params: Mapping[str, str],
    filterable: Mapping[str, Callable[[str], Any]],
    default_sort: str = "-created_at",
) -> ListingQuery:
    """Translate request query parameters into a MongoDB filter, sort and page."""
    query = ListingQuery(
        page=positive_int(params, "page", 1),
        limit=min(positive_int(params, "limit", DEFAULT_LIMIT), MAX_LIMIT),
    )

    errors: dict[str, list[str]] = {}
    for key, raw in params.items():
        if key in RESERVED_PARAMS:
            continue
        match = _KEY_PATTERN.match(key)
        if not match or match["field"] not in filterable:
            errors.setdefault(key, []).append("Unknown filter")
            continue
        name, op = match["field"], match["op"]
        if op is not None and op not in OPERATORS:
            errors.setdefault(key, []).append(f"Unsupported operator '{op}'")
            continue

        convert = filterable[name]
        try:
            if op == "in":
                value = [convert(part) for part in raw.split(",") if part]
            else:
                value = convert(raw)
        except (ValueError, ArithmeticError) as exc:
            errors.setdefault(key, []).append(str(exc) or "Invalid value")
            continue

        if op is None:
            query.filters[name] = value
        else:
            query.filters.setdefault(name, {})
            if not isinstance(query.filters[name], dict):
                query.filters[name] = {"$eq": query.filters[name]}
            query.filters[name][OPERATORS[op]] = value

    if errors:
        raise ValidationError(errors)

    sortable = set(filterable) | {"created_at", "updated_at"}
    for part in (params.get("sort") or default_sort).split(","):
        part = part.strip()
        if not part:
            continue
        direction = pymongo.DESCENDING if part.startswith("-") else pymongo.ASCENDING
        name = part.lstrip("-+")
        if name not in sortable:
            raise ValidationError({"sort": [f"Cannot sort by '{name}'"]})
        query.sort.append((name, direction))

    return query


def paginate(repository: Repository, listing: ListingQuery, scope: dict | None = None) -> ListingPage:
    """Run a listing query, AND-ing the caller's filters with a fixed scope."""
    filters = {**listing.filters, **(scope or {})}
    total = repository.count(filters)
    items = repository.find(filters, sort=listing.sort, skip=listing.skip, limit=listing.limit)
    return ListingPage(items=items, total=total, page=listing.page, limit=listing.limit)
