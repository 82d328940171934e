"""Contact message aggregate."""

from enum import Enum

from pydantic import EmailStr, Field, field_validator

from storefront.shared.db import CONTACTS
from storefront.shared.domain import Aggregate, Repository


class ContactStatus(Enum):
    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    CLOSED = "closed"


class Contact(Aggregate):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str = ""
    subject: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    status: ContactStatus = ContactStatus.NEW

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()

    def mark(self, status: ContactStatus) -> None:
        self.status = status
        self.touch()


class ContactRepository(Repository[Contact]):
    collection_name = CONTACTS
    aggregate = Contact
    not_found_message = "Contact message not found"

    def to_document(self, obj: Contact) -> dict:
        doc = super().to_document(obj)
        doc["status"] = obj.status.value
        return doc
