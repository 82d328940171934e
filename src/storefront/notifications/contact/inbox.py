"""Contact form: store the message, notify the shop and acknowledge the sender."""

from collections.abc import Mapping

from storefront.notifications.channel import dispatch_email
from storefront.notifications.contact.contact import Contact, ContactRepository, ContactStatus
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.exceptions import ValidationError
from storefront.shared.listing import ListingPage, paginate, parse_listing
from storefront.shared.logging import get_logger

logger = get_logger(__name__)

FILTERABLE = {"status": str, "email": str}


class SubmitContact(Command):
    name: str
    email: str
    subject: str
    message: str
    phone: str = ""


class UpdateContactStatus(Command):
    contact_id: str
    status: str


class ContactInbox:
    def __init__(self, store: Store, admin_email: str) -> None:
        self.contacts = ContactRepository(store)
        self.admin_email = admin_email

    def submit(self, command: SubmitContact) -> Contact:
        contact = Contact(
            name=command.name,
            email=command.email,
            phone=command.phone,
            subject=command.subject,
            message=command.message,
        )
        self.contacts.add(contact)
        logger.info("Contact message received", contact_id=contact.id)

        dispatch_email(
            to=self.admin_email,
            subject="New Contact Form Submission",
            body="\n".join(
                [
                    f"Name: {contact.name}",
                    f"Email: {contact.email}",
                    f"Phone: {contact.phone or 'Not provided'}",
                    f"Subject: {contact.subject}",
                    f"Message: {contact.message}",
                ]
            ),
        )
        dispatch_email(
            to=contact.email,
            subject="Thank you for contacting us",
            body=(
                f"Dear {contact.name},\n\n"
                "Thank you for contacting us. We have received your message "
                "and will get back to you as soon as possible."
            ),
        )
        return contact

    def list_contacts(self, params: Mapping[str, str]) -> ListingPage:
        return paginate(self.contacts, parse_listing(params, FILTERABLE))

    def get_contact(self, contact_id: str) -> Contact:
        return self.contacts.get(contact_id)

    def update_status(self, command: UpdateContactStatus) -> Contact:
        try:
            status = ContactStatus(command.status)
        except ValueError:
            allowed = ", ".join(s.value for s in ContactStatus)
            raise ValidationError({"status": [f"Must be one of: {allowed}"]}) from None
        contact = self.contacts.get(command.contact_id)
        contact.mark(status)
        return self.contacts.add(contact)

    def delete_contact(self, contact_id: str) -> None:
        self.contacts.delete(self.contacts.get(contact_id))
