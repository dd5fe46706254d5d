"""
Unit tests for the Mailgun client and the email templates.
"""

from datetime import datetime
from unittest.mock import AsyncMock

import httpx
import pytest

from vira.server.services.email_service import (
    EmailDeliveryError,
    EmailService,
    html_to_text,
    review_reminder_email,
    review_urgency,
    vendor_invite_email,
    welcome_email,
)

DUE = datetime(2026, 4, 2, 9, 0)


@pytest.mark.asyncio
class TestEmailService:
    async def test_posts_form_to_domain_endpoint(self, email_service, mailgun):
        message_id = await email_service.send(
            "riley@vira.test", "Hello", "<p>Hi &amp; welcome</p>", tags=["welcome", "onboarding"]
        )
        assert message_id == "<msg@mock>"

        request = mailgun.requests[0]
        assert str(request.url) == "http://mock-mailgun/v3/mg.vira.test/messages"
        assert request.headers["Authorization"].startswith("Basic ")
        form = mailgun.messages[0]
        assert form["subject"] == ["Hello"]
        assert form["text"] == ["Hi & welcome"]
        assert form["o:tag"] == ["welcome", "onboarding"]

    async def test_provider_error_carries_status(self, email_service, mailgun):
        mailgun.fail_with = 401
        with pytest.raises(EmailDeliveryError) as exc_info:
            await email_service.send("riley@vira.test", "Hello", "<p>Hi</p>")
        assert exc_info.value.provider_status == 401
        assert exc_info.value.status_code == 502

    async def test_unconfigured_service_never_calls_out(self, mailgun):
        async with mailgun.client() as http:
            service = EmailService(api_key=None, domain="mg.vira.test", client=http)
            assert not service.is_configured
            with pytest.raises(EmailDeliveryError, match="not configured"):
                await service.send("riley@vira.test", "Hello", "<p>Hi</p>")
        assert mailgun.requests == []

    async def test_transport_error(self):
        def boom(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(boom)) as http:
            service = EmailService(api_key="key", domain="mg.vira.test", base_url="http://mock-mailgun", client=http)
            with pytest.raises(EmailDeliveryError, match="Mailgun request failed"):
                await service.send("riley@vira.test", "Hello", "<p>Hi</p>")

    async def test_unexpected_client_error_becomes_delivery_error(self):
        client = httpx.AsyncClient()
        client.post = AsyncMock(side_effect=RuntimeError("client closed"))
        service = EmailService(api_key="key", domain="mg.vira.test", base_url="http://mock-mailgun", client=client)
        with pytest.raises(EmailDeliveryError, match="client closed"):
            await service.send("riley@vira.test", "Hello", "<p>Hi</p>")
        await client.aclose()

    async def test_untagged_message_sends_plain_form(self, email_service, mailgun):
        await email_service.send("riley@vira.test", "Hello", "<p>Hi</p>")

        assert mailgun.requests[0].headers["Content-Type"] == "application/x-www-form-urlencoded"
        form = mailgun.messages[0]
        assert form["to"] == ["riley@vira.test"]
        assert "o:tag" not in form


def test_html_to_text():
    html = "<h2>Title</h2><p>Line one<br/>Line two</p>\n\n\n<p>&lt;done&gt;</p>"
    assert html_to_text(html) == "Title\nLine one\nLine two\n\n<done>"


@pytest.mark.parametrize("days,expected", [(-1, "overdue"), (0, "due tomorrow"), (1, "due tomorrow"), (4, "due in 4 days")])
def test_review_urgency(days, expected):
    assert review_urgency(days) == expected


def test_reminder_subject_reflects_urgency():
    message = review_reminder_email(
        reviewer_name="Riley", project_title="Brand refresh", due_date=DUE, days_until_due=3, app_url="http://app.test/"
    )
    assert message.subject == "Reminder: review for Brand refresh is due in 3 days"
    assert "http://app.test/rate-project" in message.html
    assert message.tags == ["review_reminder"]


def test_welcome_email_escapes_and_includes_password():
    message = welcome_email(full_name="<Riley>", email="r@vira.test", temporary_password="Ab1!", app_url="http://app.test")
    assert "&lt;Riley&gt;" in message.html
    assert "Ab1!" in message.html
    assert "http://app.test/sign-in" in message.html


def test_invite_email_mentions_expiry():
    message = vendor_invite_email(invite_url="http://app.test/vendor/apply/tok", expires_at=DUE)
    assert "April 02, 2026" in message.html
    assert 'href="http://app.test/vendor/apply/tok"' in message.html
