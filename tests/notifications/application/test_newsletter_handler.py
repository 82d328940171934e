import pytest

from storefront.notifications.newsletter.mailing import (
    NewsletterHandler,
    SendNewsletter,
    Subscribe,
    SubscribeOutcome,
)
from storefront.notifications.newsletter.subscription import SubscriptionRepository
from storefront.shared.exceptions import MissingField, NotFound


@pytest.fixture()
def newsletter(store):
    return NewsletterHandler(store, client_url="https://shop.example.com/")


class TestSubscribe:
    def test_new_subscriber_gets_welcome_with_unsubscribe_link(self, newsletter, emails):
        subscription, outcome = newsletter.subscribe(Subscribe(email="Fan@Example.com"))

        assert outcome is SubscribeOutcome.SUBSCRIBED
        welcome = emails.sent_to("fan@example.com")
        assert len(welcome) == 1
        assert f"https://shop.example.com/newsletter/unsubscribe/{subscription.unsubscribe_token}" in welcome[0]["body"]

    def test_already_subscribed_is_a_no_op(self, newsletter, emails, store):
        newsletter.subscribe(Subscribe(email="fan@example.com"))
        _, outcome = newsletter.subscribe(Subscribe(email="FAN@example.com"))

        assert outcome is SubscribeOutcome.ALREADY_SUBSCRIBED
        assert len(emails.sent_emails) == 1
        assert SubscriptionRepository(store).count() == 1

    def test_resubscribe_after_unsubscribe(self, newsletter, emails):
        subscription, _ = newsletter.subscribe(Subscribe(email="fan@example.com"))
        newsletter.unsubscribe(subscription.unsubscribe_token)

        again, outcome = newsletter.subscribe(Subscribe(email="fan@example.com"))

        assert outcome is SubscribeOutcome.RESUBSCRIBED
        assert again.is_subscribed
        assert again.id == subscription.id
        assert len(emails.sent_emails) == 1


class TestUnsubscribe:
    def test_marks_unsubscribed(self, newsletter, emails, store):
        subscription, _ = newsletter.subscribe(Subscribe(email="fan@example.com"))
        newsletter.unsubscribe(subscription.unsubscribe_token)

        stored = SubscriptionRepository(store).get(subscription.id)
        assert not stored.is_subscribed
        assert stored.unsubscribed_at is not None

    def test_unknown_token(self, newsletter):
        with pytest.raises(NotFound, match="Invalid or expired token"):
            newsletter.unsubscribe("deadbeef")


class TestSend:
    def test_sends_in_batches_of_fifty(self, newsletter, emails):
        for i in range(120):
            newsletter.subscribe(Subscribe(email=f"fan{i}@example.com"))
        emails.reset()

        broadcast = newsletter.send(SendNewsletter(subject="Autumn sale", content="<p>20% off</p>"))

        assert (broadcast.recipients, broadcast.batches) == (120, 3)
        assert [len(e["bcc"]) for e in emails.sent_emails] == [50, 50, 20]
        assert all(e["html_body"] == "<p>20% off</p>" for e in emails.sent_emails)

    def test_skips_unsubscribed(self, newsletter, emails):
        kept, _ = newsletter.subscribe(Subscribe(email="kept@example.com"))
        gone, _ = newsletter.subscribe(Subscribe(email="gone@example.com"))
        newsletter.unsubscribe(gone.unsubscribe_token)
        emails.reset()

        newsletter.send(SendNewsletter(subject="News", content="Hello"))
        assert emails.sent_emails[0]["bcc"] == ["kept@example.com"]

    def test_subscribers_never_see_each_other(self, newsletter, emails):
        newsletter.subscribe(Subscribe(email="alice@example.com"))
        newsletter.subscribe(Subscribe(email="bob@example.com"))
        emails.reset()

        newsletter.send(SendNewsletter(subject="News", content="Hello"))

        assert all(len(e["to"]) <= 1 for e in emails.sent_emails)
        assert sorted(emails.sent_emails[0]["bcc"]) == ["alice@example.com", "bob@example.com"]
        assert len(emails.sent_to("bob@example.com")) == 1

    @pytest.mark.parametrize("subject,content", [("", "Hello"), ("News", "")])
    def test_requires_subject_and_content(self, newsletter, subject, content):
        with pytest.raises(MissingField, match="Please provide subject and content"):
            newsletter.send(SendNewsletter(subject=subject, content=content))

    def test_no_subscribers(self, newsletter):
        with pytest.raises(NotFound, match="No active subscribers found"):
            newsletter.send(SendNewsletter(subject="News", content="Hello"))
