"""Amazon SES email adapter."""

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from storefront.notifications.channel.email_port import EmailPort
from storefront.shared.logging import get_logger

logger = get_logger(__name__)


class SESEmailAdapter(EmailPort):
    """Sends email through Amazon SES."""

    def __init__(self, sender: str, region_name: str = "us-east-1", client=None) -> None:
        self.sender = sender
        self.region_name = region_name
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client("ses", region_name=self.region_name)
        return self._client

    def send(
        self,
        to: str | list[str],
        subject: str,
        body: str,
        html_body: str | None = None,
        bcc: list[str] | None = None,
    ) -> dict:
        recipients = [to] if isinstance(to, str) else list(to)
        destination = {}
        if recipients:
            destination["ToAddresses"] = recipients
        if bcc:
            destination["BccAddresses"] = list(bcc)
        message_body = {"Text": {"Data": body, "Charset": "UTF-8"}}
        if html_body:
            message_body["Html"] = {"Data": html_body, "Charset": "UTF-8"}

        try:
            response = self._get_client().send_email(
                Source=self.sender,
                Destination=destination,
                Message={
                    "Subject": {"Data": subject, "Charset": "UTF-8"},
                    "Body": message_body,
                },
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("SES send failed", recipients=len(recipients) + len(bcc or []), subject=subject, error=str(exc))
            return {"message_id": None, "status": "failed", "error": str(exc)}

        return {"message_id": response.get("MessageId"), "status": "sent"}
