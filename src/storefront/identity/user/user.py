"""User aggregate with Address entity, password hashing and wishlist.

The address book holds at most ``MAX_ADDRESSES`` entries and, when not empty,
exactly one default address.
"""

from typing import Any, ClassVar

import bcrypt
from pydantic import BaseModel, EmailStr, Field, field_validator

from storefront.shared.auth import Role
from storefront.shared.db import USERS
from storefront.shared.domain import Aggregate, Repository, new_id
from storefront.shared.exceptions import NotFound, ValidationError

MAX_ADDRESSES = 10
MIN_PASSWORD_LENGTH = 6


def hash_password(password: str, rounds: int = 10) -> str:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


class Address(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1, description="Label such as Home or Work")
    is_default: bool = False
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)
    country: str = Field(min_length=1)
    phone_number: str | None = None


class User(Aggregate):
    """User aggregate root."""

    VISIBILITY: ClassVar[dict[str, Any]] = {}

    name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password_hash: str
    role: Role = Role.USER
    profile_image: str = ""
    phone_number: str | None = None
    addresses: list[Address] = Field(default_factory=list)
    wishlist: list[str] = Field(default_factory=list)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()

    @classmethod
    def register(cls, name: str, email: str, password: str, role: Role = Role.USER, rounds: int = 10) -> "User":
        return cls(name=name, email=email, password_hash=hash_password(password, rounds), role=role)

    def check_password(self, password: str) -> bool:
        return bcrypt.checkpw(password.encode("utf-8"), self.password_hash.encode("utf-8"))

    def update_profile(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        self.touch()

    def replace_profile_image(self, url: str) -> str:
        previous = self.profile_image
        self.profile_image = url
        self.touch()
        return previous

    # -------------------------------------------------------------------
    # Address book
    # -------------------------------------------------------------------
    def _address(self, address_id: str) -> Address:
        address = next((a for a in self.addresses if a.id == address_id), None)
        if address is None:
            raise NotFound("Address not found")
        return address

    def _make_default(self, address_id: str) -> None:
        self.addresses = [a.model_copy(update={"is_default": a.id == address_id}) for a in self.addresses]

    def add_address(self, is_default: bool = False, **fields) -> Address:
        if len(self.addresses) >= MAX_ADDRESSES:
            raise ValidationError({"addresses": [f"Cannot have more than {MAX_ADDRESSES} addresses"]})

        # First address is always default
        address = Address(is_default=False, **fields)
        self.addresses = [*self.addresses, address]
        if is_default or len(self.addresses) == 1:
            self._make_default(address.id)
        self.touch()
        return self._address(address.id)

    def update_address(self, address_id: str, is_default: bool | None = None, **fields) -> Address:
        address = self._address(address_id)
        updated = Address.model_validate({**address.model_dump(), **fields})
        self.addresses = [updated if a.id == address_id else a for a in self.addresses]
        if is_default:
            self._make_default(address_id)
        self.touch()
        return self._address(address_id)

    def remove_address(self, address_id: str) -> None:
        address = self._address(address_id)
        self.addresses = [a for a in self.addresses if a.id != address_id]
        if address.is_default and self.addresses:
            self._make_default(self.addresses[0].id)
        self.touch()

    def set_default_address(self, address_id: str) -> Address:
        self._address(address_id)
        self._make_default(address_id)
        self.touch()
        return self._address(address_id)

    # -------------------------------------------------------------------
    # Wishlist
    # -------------------------------------------------------------------
    def add_to_wishlist(self, product_id: str) -> None:
        if product_id in self.wishlist:
            raise ValidationError({"wishlist": ["Product already in wishlist"]})
        self.wishlist = [*self.wishlist, product_id]
        self.touch()

    def remove_from_wishlist(self, product_id: str) -> None:
        self.wishlist = [p for p in self.wishlist if p != product_id]
        self.touch()


class UserRepository(Repository[User]):
    collection_name = USERS
    aggregate = User
    not_found_message = "User not found"

    def to_document(self, obj: User) -> dict:
        doc = super().to_document(obj)
        doc["role"] = obj.role.value
        return doc

    def get_by_email(self, email: str) -> User | None:
        return self.find_one({"email": email.strip().lower()})
