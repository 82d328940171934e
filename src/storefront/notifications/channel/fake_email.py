"""Fake email adapter: records sent emails for testing."""

from uuid import uuid4

from storefront.notifications.channel.email_port import EmailPort


def _recipients(email: dict) -> list[str]:
    to = [email["to"]] if isinstance(email["to"], str) else list(email["to"])
    return to + email["bcc"]


class FakeEmailAdapter(EmailPort):
    """Email adapter that records messages in memory for test assertions."""

    def __init__(self):
        self.sent_emails: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Email delivery failed"):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(
        self,
        to: str | list[str],
        subject: str,
        body: str,
        html_body: str | None = None,
        bcc: list[str] | None = None,
    ) -> dict:
        if not self.should_succeed:
            return {
                "message_id": None,
                "status": "failed",
                "error": self.failure_reason,
            }

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append(
            {
                "message_id": message_id,
                "to": to,
                "bcc": list(bcc or []),
                "subject": subject,
                "body": body,
                "html_body": html_body,
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def sent_to(self, address: str) -> list[dict]:
        """Messages whose recipients include ``address``."""
        return [email for email in self.sent_emails if address in _recipients(email)]

    def reset(self):
        """Clear sent emails (useful between tests)."""
        self.sent_emails.clear()
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
