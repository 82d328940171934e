"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from storefront.shared.schemas import OutModel

# --- Auth Request Schemas ---


class RegisterRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [{"name": "Jane Doe", "email": "jane@example.com", "password": "s3cret-pass"}],
        },
    )

    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: str = ""
    password: str = ""


# --- Profile Request Schemas ---


class UpdateProfileRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=50)
    email: EmailStr | None = None
    phone_number: str | None = None


class AdminUpdateUserRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=50)
    email: EmailStr | None = None
    role: str | None = Field(None, pattern="^(user|admin)$")


class AddAddressRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "name": "Home",
                    "street": "742 Evergreen Terrace",
                    "city": "Springfield",
                    "state": "OR",
                    "zip_code": "97403",
                    "country": "US",
                    "is_default": True,
                }
            ]
        },
    )

    name: str = Field(..., min_length=1)
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    phone_number: str | None = None
    is_default: bool = False


class UpdateAddressRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1)
    street: str | None = Field(None, min_length=1)
    city: str | None = Field(None, min_length=1)
    state: str | None = Field(None, min_length=1)
    zip_code: str | None = Field(None, min_length=1)
    country: str | None = Field(None, min_length=1)
    phone_number: str | None = None
    is_default: bool | None = None


# --- Response Schemas ---


class AddressOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    is_default: bool
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    phone_number: str | None = None


class UserOut(OutModel):
    name: str
    email: str
    role: str
    profile_image: str
    phone_number: str | None = None
    addresses: list[AddressOut]
    wishlist: list[str]

    @classmethod
    def from_user(cls, user) -> UserOut:
        return cls.model_validate({**user.model_dump(exclude={"password_hash"}), "role": user.role.value})


class AuthUser(BaseModel):
    id: str
    name: str
    email: str
    role: str


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    user: AuthUser
