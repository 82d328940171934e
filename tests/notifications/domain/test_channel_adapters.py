"""Tests for email channel adapters: the in-memory fake and SES under moto."""

import boto3
import pytest
from moto import mock_aws

from storefront.notifications.channel import configure_email_channel, dispatch_email, get_email_channel, reset_channels
from storefront.notifications.channel.fake_email import FakeEmailAdapter
from storefront.notifications.channel.ses_email import SESEmailAdapter


class TestFakeEmailAdapter:
    def setup_method(self):
        self.adapter = FakeEmailAdapter()

    def test_send_records_email(self):
        result = self.adapter.send(to="test@example.com", subject="Hi", body="Hello!")
        assert result["status"] == "sent"
        assert result["message_id"] is not None
        assert self.adapter.sent_emails[0]["to"] == "test@example.com"

    def test_send_failure(self):
        self.adapter.configure(should_succeed=False, failure_reason="SMTP error")
        result = self.adapter.send(to="a@b.com", subject="Hi", body="Hello")
        assert result == {"message_id": None, "status": "failed", "error": "SMTP error"}
        assert self.adapter.sent_emails == []

    def test_sent_to_matches_batches(self):
        self.adapter.send(to=["a@b.com", "c@d.com"], subject="News", body="Hello")
        assert len(self.adapter.sent_to("c@d.com")) == 1
        assert self.adapter.sent_to("x@y.com") == []

    def test_sent_to_matches_blind_copies(self):
        self.adapter.send(to=[], bcc=["a@b.com", "c@d.com"], subject="News", body="Hello")
        assert len(self.adapter.sent_to("a@b.com")) == 1
        assert self.adapter.sent_emails[0]["to"] == []


class TestSESEmailAdapter:
    @pytest.fixture()
    def ses(self, monkeypatch):
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
        with mock_aws():
            client = boto3.client("ses", region_name="us-east-1")
            yield client

    def test_send_from_verified_sender(self, ses):
        ses.verify_email_identity(EmailAddress="shop@example.com")
        adapter = SESEmailAdapter(sender="shop@example.com", client=ses)

        result = adapter.send(to=["a@example.com", "b@example.com"], subject="Hi", body="Hello", html_body="<p>Hello</p>")

        assert result["status"] == "sent"
        assert result["message_id"]

    def test_blind_copies_map_to_bcc_addresses(self):
        calls = []

        class RecordingClient:
            def send_email(self, **kwargs):
                calls.append(kwargs)
                return {"MessageId": "msg-1"}

        adapter = SESEmailAdapter(sender="shop@example.com", client=RecordingClient())
        result = adapter.send(to=[], bcc=["a@example.com", "b@example.com"], subject="News", body="Hello")

        assert result == {"message_id": "msg-1", "status": "sent"}
        assert calls[0]["Destination"] == {"BccAddresses": ["a@example.com", "b@example.com"]}

    def test_bcc_only_send_from_verified_sender(self, ses):
        ses.verify_email_identity(EmailAddress="shop@example.com")
        adapter = SESEmailAdapter(sender="shop@example.com", client=ses)

        result = adapter.send(to=[], bcc=["a@example.com", "b@example.com"], subject="News", body="Hello")

        assert result["status"] == "sent"

    def test_unverified_sender_reports_failure(self, ses):
        adapter = SESEmailAdapter(sender="stranger@example.com", client=ses)
        result = adapter.send(to="a@example.com", subject="Hi", body="Hello")

        assert result["status"] == "failed"
        assert result["message_id"] is None


class TestRegistry:
    def teardown_method(self):
        reset_channels()

    def test_defaults_to_fake(self):
        reset_channels()
        assert isinstance(get_email_channel(), FakeEmailAdapter)

    def test_configure_ses(self, settings):
        channel = configure_email_channel(settings.model_copy(update={"email_backend": "ses"}))
        assert isinstance(channel, SESEmailAdapter)
        assert get_email_channel() is channel

    def test_unknown_backend(self, settings):
        with pytest.raises(ValueError):
            configure_email_channel(settings.model_copy(update={"email_backend": "pigeon"}))

    def test_dispatch_does_not_raise_on_failure(self, emails):
        emails.configure(should_succeed=False)
        result = dispatch_email(to="a@b.com", subject="Hi", body="Hello")
        assert result["status"] == "failed"
