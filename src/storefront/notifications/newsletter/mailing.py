"""Newsletter: subscribe, unsubscribe and broadcast.

Broadcasts go out in batches so a single send never exceeds the mail
provider's recipient limit.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from storefront.notifications.channel import dispatch_email
from storefront.notifications.newsletter.subscription import Subscription, SubscriptionRepository
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.exceptions import MissingField, NotFound
from storefront.shared.listing import ListingPage, as_bool, paginate, parse_listing
from storefront.shared.logging import get_logger

logger = get_logger(__name__)

BATCH_SIZE = 50

FILTERABLE = {"email": str, "is_subscribed": as_bool}


class SubscribeOutcome(Enum):
    SUBSCRIBED = "Successfully subscribed to newsletter"
    ALREADY_SUBSCRIBED = "You are already subscribed to our newsletter"
    RESUBSCRIBED = "You have been resubscribed to our newsletter"


class Subscribe(Command):
    email: str


class SendNewsletter(Command):
    subject: str
    content: str


@dataclass(frozen=True)
class Broadcast:
    recipients: int
    batches: int


def batched(items: list[str], size: int) -> list[list[str]]:
    return [items[start : start + size] for start in range(0, len(items), size)]


class NewsletterHandler:
    def __init__(self, store: Store, client_url: str = "") -> None:
        self.subscriptions = SubscriptionRepository(store)
        self.client_url = client_url.rstrip("/")

    def unsubscribe_url(self, subscription: Subscription) -> str:
        return f"{self.client_url}/newsletter/unsubscribe/{subscription.unsubscribe_token}"

    def subscribe(self, command: Subscribe) -> tuple[Subscription, SubscribeOutcome]:
        subscription = self.subscriptions.get_by_email(command.email)
        if subscription is not None and subscription.is_subscribed:
            return subscription, SubscribeOutcome.ALREADY_SUBSCRIBED

        if subscription is not None:
            subscription.resubscribe()
            outcome = SubscribeOutcome.RESUBSCRIBED
        else:
            subscription = Subscription(email=command.email)
            outcome = SubscribeOutcome.SUBSCRIBED
        self.subscriptions.add(subscription)

        if outcome is SubscribeOutcome.SUBSCRIBED:
            dispatch_email(
                to=subscription.email,
                subject="Welcome to our newsletter",
                body=(
                    "Thank you for subscribing to our newsletter! You'll now receive updates about "
                    "our latest products and offers. If you wish to unsubscribe, please click this "
                    f"link: {self.unsubscribe_url(subscription)}"
                ),
            )
        logger.info("Newsletter subscription", subscription_id=subscription.id, outcome=outcome.name)
        return subscription, outcome

    def unsubscribe(self, token: str) -> Subscription:
        subscription = self.subscriptions.get_by_token(token)
        if subscription is None:
            raise NotFound("Invalid or expired token")
        subscription.unsubscribe()
        return self.subscriptions.add(subscription)

    def list_subscribers(self, params: Mapping[str, str]) -> ListingPage:
        return paginate(self.subscriptions, parse_listing(params, FILTERABLE))

    def delete_subscriber(self, subscription_id: str) -> None:
        self.subscriptions.delete(self.subscriptions.get(subscription_id))

    def send(self, command: SendNewsletter) -> Broadcast:
        if not command.subject or not command.content:
            raise MissingField("Please provide subject and content")

        emails = self.subscriptions.active_emails()
        if not emails:
            raise NotFound("No active subscribers found")

        batches = batched(emails, BATCH_SIZE)
        for batch in batches:
            dispatch_email(to=[], bcc=batch, subject=command.subject, body=command.content, html_body=command.content)
        logger.info("Newsletter sent", recipients=len(emails), batches=len(batches))
        return Broadcast(recipients=len(emails), batches=len(batches))
