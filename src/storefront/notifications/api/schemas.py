"""Pydantic request/response schemas for the Notifications API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from storefront.shared.schemas import OutModel

# --- Request Schemas ---


class ContactRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "name": "Ada",
                    "email": "ada@example.com",
                    "subject": "Strap sizing",
                    "message": "Does the bracelet fit a 16cm wrist?",
                }
            ]
        },
    )

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = ""
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)


class ContactStatusRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: str = Field(..., pattern="^(new|read|replied|closed)$")


class SubscribeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr


class SendNewsletterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    subject: str = ""
    content: str = ""


# --- Response Schemas ---


class ContactOut(OutModel):
    name: str
    email: str
    phone: str
    subject: str
    message: str
    status: str

    @classmethod
    def from_contact(cls, contact) -> ContactOut:
        return cls.model_validate({**contact.model_dump(), "status": contact.status.value})


class SubscriberOut(OutModel):
    email: str
    is_subscribed: bool
    subscribed_at: datetime
    unsubscribed_at: datetime | None = None


class BroadcastOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    recipients: int
    batches: int
