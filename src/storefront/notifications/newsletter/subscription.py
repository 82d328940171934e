"""Newsletter subscription aggregate."""

import secrets
from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from storefront.shared.db import NEWSLETTERS
from storefront.shared.domain import Aggregate, Repository, utcnow


def new_unsubscribe_token() -> str:
    return secrets.token_hex(20)


class Subscription(Aggregate):
    email: EmailStr
    is_subscribed: bool = True
    unsubscribe_token: str = Field(default_factory=new_unsubscribe_token)
    subscribed_at: datetime = Field(default_factory=utcnow)
    unsubscribed_at: datetime | None = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    def resubscribe(self) -> None:
        self.is_subscribed = True
        self.unsubscribe_token = new_unsubscribe_token()
        self.subscribed_at = utcnow()
        self.unsubscribed_at = None
        self.touch()

    def unsubscribe(self) -> None:
        self.is_subscribed = False
        self.unsubscribed_at = utcnow()
        self.touch()


class SubscriptionRepository(Repository[Subscription]):
    collection_name = NEWSLETTERS
    aggregate = Subscription
    not_found_message = "Subscriber not found"

    def get_by_email(self, email: str) -> Subscription | None:
        return self.find_one({"email": email.strip().lower()})

    def get_by_token(self, token: str) -> Subscription | None:
        return self.find_one({"unsubscribe_token": token})

    def active_emails(self) -> list[str]:
        cursor = self.collection.find({"is_subscribed": True}, {"email": 1}).sort("subscribed_at", 1)
        return [doc["email"] for doc in cursor]
