"""FastAPI endpoints for the Notifications context: contact form and newsletter."""

from fastapi import APIRouter, Depends, Request

from storefront.dependencies import admin_actor, get_app_settings, get_store
from storefront.notifications.api.schemas import (
    BroadcastOut,
    ContactOut,
    ContactRequest,
    ContactStatusRequest,
    SendNewsletterRequest,
    SubscribeRequest,
    SubscriberOut,
)
from storefront.notifications.contact.inbox import ContactInbox, SubmitContact, UpdateContactStatus
from storefront.notifications.newsletter.mailing import NewsletterHandler, SendNewsletter, Subscribe
from storefront.shared.auth import Actor
from storefront.shared.config import Settings
from storefront.shared.db import Store
from storefront.shared.schemas import Envelope, PageEnvelope, StatusResponse

contact_router = APIRouter(prefix="/contact", tags=["contact"])
newsletter_router = APIRouter(prefix="/newsletter", tags=["newsletter"])


def _inbox(store: Store, settings: Settings) -> ContactInbox:
    return ContactInbox(store, admin_email=settings.admin_email)


# --- Contact endpoints ---


@contact_router.post("", status_code=201, response_model=Envelope[ContactOut])
def submit_contact(
    body: ContactRequest,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Envelope:
    command = SubmitContact(**body.model_dump(mode="json"))
    contact = _inbox(store, settings).submit(command)
    return Envelope(message="Your message has been sent successfully", data=ContactOut.from_contact(contact))


@contact_router.get("", response_model=PageEnvelope[ContactOut])
def list_contacts(
    request: Request,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> PageEnvelope:
    page = _inbox(store, settings).list_contacts(request.query_params)
    data = [ContactOut.from_contact(contact) for contact in page.items]
    return PageEnvelope(count=len(data), total=page.total, pagination=page.pagination, data=data)


@contact_router.get("/{contact_id}", response_model=Envelope[ContactOut])
def get_contact(
    contact_id: str,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Envelope:
    return Envelope(data=ContactOut.from_contact(_inbox(store, settings).get_contact(contact_id)))


@contact_router.put("/{contact_id}", response_model=Envelope[ContactOut])
def update_contact_status(
    contact_id: str,
    body: ContactStatusRequest,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Envelope:
    command = UpdateContactStatus(contact_id=contact_id, status=body.status)
    return Envelope(data=ContactOut.from_contact(_inbox(store, settings).update_status(command)))


@contact_router.delete("/{contact_id}", response_model=StatusResponse)
def delete_contact(
    contact_id: str,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> StatusResponse:
    _inbox(store, settings).delete_contact(contact_id)
    return StatusResponse(message="Contact message deleted successfully")


# --- Newsletter endpoints ---


@newsletter_router.post("/subscribe", response_model=StatusResponse)
def subscribe(
    body: SubscribeRequest,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> StatusResponse:
    _, outcome = NewsletterHandler(store, settings.client_url).subscribe(Subscribe(email=str(body.email)))
    return StatusResponse(message=outcome.value)


@newsletter_router.get("/unsubscribe/{token}", response_model=StatusResponse)
def unsubscribe(token: str, store: Store = Depends(get_store)) -> StatusResponse:
    NewsletterHandler(store).unsubscribe(token)
    return StatusResponse(message="Successfully unsubscribed from newsletter")


@newsletter_router.get("", response_model=PageEnvelope[SubscriberOut])
def list_subscribers(
    request: Request,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
) -> PageEnvelope:
    return PageEnvelope.of(NewsletterHandler(store).list_subscribers(request.query_params), SubscriberOut)


@newsletter_router.delete("/{subscription_id}", response_model=StatusResponse)
def delete_subscriber(
    subscription_id: str,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
) -> StatusResponse:
    NewsletterHandler(store).delete_subscriber(subscription_id)
    return StatusResponse(message="Subscriber deleted successfully")


@newsletter_router.post("/send", response_model=Envelope[BroadcastOut])
def send_newsletter(
    body: SendNewsletterRequest,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    broadcast = NewsletterHandler(store).send(SendNewsletter(subject=body.subject, content=body.content))
    return Envelope(
        message=f"Newsletter sent to {broadcast.recipients} subscribers",
        data=BroadcastOut.model_validate(broadcast),
    )
