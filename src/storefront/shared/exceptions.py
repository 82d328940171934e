"""Error taxonomy shared by every Storefront context.

Each error carries a human-readable message and the HTTP status the API layer
answers with. Client faults are below 500.
"""


class StorefrontError(Exception):
    """Base class for all expected, client-visible failures."""

    status_code = 500

    def __init__(self, message: str, errors: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors

    @property
    def is_client_fault(self) -> bool:
        return self.status_code < 500


class NotFound(StorefrontError):
    status_code = 404


class InvalidQuantity(StorefrontError):
    status_code = 400


class OutOfStock(StorefrontError):
    status_code = 400


class InsufficientStock(StorefrontError):
    status_code = 400


class MissingField(StorefrontError):
    status_code = 400


class EmptyCart(StorefrontError):
    status_code = 400


class ProductGone(StorefrontError):
    status_code = 400


class NotAbandoned(StorefrontError):
    status_code = 400


class ValidationError(StorefrontError):
    """Field-level validation failure; ``errors`` maps field names to messages."""

    status_code = 400

    def __init__(self, errors: dict[str, list[str]]) -> None:
        message = "; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in errors.items())
        super().__init__(message, errors=errors)


class Conflict(StorefrontError):
    status_code = 409


class ConcurrentModification(Conflict):
    """A compare-and-swap save lost against a concurrent writer."""


class Unauthorized(StorefrontError):
    status_code = 401


class Forbidden(StorefrontError):
    status_code = 403


class StorageError(StorefrontError):
    status_code = 502


class OrderCreationFailed(StorefrontError):
    """The order collaborator rejected a checkout draft."""

    status_code = 502


class NotPublished(StorefrontError):
    status_code = 400


def field_errors(errors) -> dict[str, list[str]]:
    """Group pydantic error entries by dotted field location."""
    fields: dict[str, list[str]] = {}
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        fields.setdefault(".".join(location) or "body", []).append(error.get("msg", "Invalid value"))
    return fields
