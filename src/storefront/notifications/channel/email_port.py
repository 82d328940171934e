"""Email channel port: abstract interface for email dispatch."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    """Abstract interface for email dispatch adapters."""

    @abstractmethod
    def send(
        self,
        to: str | list[str],
        subject: str,
        body: str,
        html_body: str | None = None,
        bcc: list[str] | None = None,
    ) -> dict:
        """Send an email message to one recipient or a batch.

        Addresses in ``bcc`` receive the message without seeing each other;
        ``to`` may be empty when ``bcc`` carries every recipient.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
