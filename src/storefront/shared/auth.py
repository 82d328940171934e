"""Actors, access tokens and the visibility predicate.

Every handler receives a typed ``Actor`` resolved once per request. Whether a
resource is visible to that actor is decided here and nowhere else.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import jwt

from storefront.shared.config import Settings
from storefront.shared.domain import Aggregate
from storefront.shared.exceptions import Forbidden, Unauthorized

TOKEN_ALGORITHM = "HS256"


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    """The caller of a request: an authenticated user or an anonymous visitor."""

    user_id: str | None
    role: Role | None
    name: str | None = None
    email: str | None = None

    @classmethod
    def anonymous(cls) -> "Actor":
        return cls(user_id=None, role=None)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def require_authenticated(self) -> "Actor":
        if not self.is_authenticated:
            raise Unauthorized("Not authorized to access this route")
        return self

    def require_admin(self) -> "Actor":
        self.require_authenticated()
        if not self.is_admin:
            raise Forbidden(f"User role {self.role.value} is not authorized to access this route")
        return self

    def require_owner(self, owner_id: str) -> "Actor":
        """Allow the resource owner or an admin."""
        self.require_authenticated()
        if not self.is_admin and owner_id != self.user_id:
            raise Forbidden("Not authorized to access this resource")
        return self


def visibility_filter(actor: Actor, aggregate: type[Aggregate]) -> dict[str, Any]:
    """Document filter restricting ``aggregate`` to what ``actor`` may see."""
    if actor.is_admin:
        return {}
    return dict(aggregate.VISIBILITY)


def is_visible_to(actor: Actor, resource: Aggregate) -> bool:
    return all(getattr(resource, name) == value for name, value in visibility_filter(actor, type(resource)).items())


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------
def issue_token(settings: Settings, user_id: str, role: str, now: datetime | None = None) -> str:
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": user_id,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.jwt_expires_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=TOKEN_ALGORITHM)


def decode_token(settings: Settings, token: str) -> dict:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[TOKEN_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired. Please log in again") from None
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token. Please log in again") from None
