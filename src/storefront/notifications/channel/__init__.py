"""Email channel registry.

Uses the fake adapter by default; SES is selected via settings in production.
"""

from storefront.notifications.channel.email_port import EmailPort
from storefront.shared.config import Settings
from storefront.shared.logging import get_logger

logger = get_logger(__name__)

_email_channel: EmailPort | None = None


def get_email_channel() -> EmailPort:
    """Return the configured email adapter (singleton)."""
    global _email_channel
    if _email_channel is None:
        from storefront.notifications.channel.fake_email import FakeEmailAdapter

        _email_channel = FakeEmailAdapter()
    return _email_channel


def set_email_channel(channel: EmailPort) -> None:
    global _email_channel
    _email_channel = channel


def reset_channels() -> None:
    """Reset the channel singleton (useful for testing)."""
    global _email_channel
    _email_channel = None


def configure_email_channel(settings: Settings) -> EmailPort:
    if settings.email_backend == "ses":
        from storefront.notifications.channel.ses_email import SESEmailAdapter

        channel = SESEmailAdapter(sender=settings.email_sender, region_name=settings.aws_region)
    elif settings.email_backend == "fake":
        from storefront.notifications.channel.fake_email import FakeEmailAdapter

        channel = FakeEmailAdapter()
    else:
        raise ValueError(f"Unknown email backend: {settings.email_backend}")
    set_email_channel(channel)
    return channel


def dispatch_email(
    to: str | list[str],
    subject: str,
    body: str,
    html_body: str | None = None,
    bcc: list[str] | None = None,
) -> dict:
    """Fire-and-forget send; failures are logged, never raised."""
    result = get_email_channel().send(to=to, subject=subject, body=body, html_body=html_body, bcc=bcc)
    if result.get("status") != "sent":
        logger.warning("Email dispatch failed", subject=subject, error=result.get("error"))
    return result
