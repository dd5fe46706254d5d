"""Transactional email through the Mailgun HTTP API.

Overview
--------
``EmailService`` posts form-encoded messages to
``{base_url}/v3/{domain}/messages`` with basic auth ``api:<key>``. Each
message carries an HTML body plus a plain-text version derived from it.

The templates below render the four emails ViRA sends: review assignments,
review reminders, welcome emails with a temporary password, and vendor
invites.

Errors
------
Every failure is raised as ``EmailDeliveryError``: a missing configuration,
a transport error, or a non-2xx answer from Mailgun. The error carries the
provider's status code and body. Callers decide whether a failed send is
fatal (vendor invites) or only reported (``email_sent=false``).
"""

from __future__ import annotations

import html as html_lib
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import httpx

from vira.core.errors import ExternalServiceError
from vira.core.logging_config import get_logger
from vira.core.monitoring import log_email_sent
from vira.server.core.config import settings

logger = get_logger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_BLANK_LINES_RE = re.compile(r"\n\s*\n+")


class EmailDeliveryError(ExternalServiceError):
    """Raised when an email could not be handed to the provider.

    Args:
        message: Human-readable error description.
        provider_status: HTTP status returned by Mailgun, if any.
        details: Response body, if any.
    """

    def __init__(self, message: str, *, provider_status: Optional[int] = None, details: Optional[str] = None) -> None:
        super().__init__(message, details=details)
        self.provider_status = provider_status


def html_to_text(html: str) -> str:
    """Plain-text rendition of an HTML body: tags stripped, entities unescaped."""
    text = re.sub(r"<br\s*/?>|</p>|</h\d>|</li>", "\n", html, flags=re.IGNORECASE)
    text = html_lib.unescape(_TAG_RE.sub("", text))
    lines = [line.strip() for line in text.splitlines()]
    return _BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()


@dataclass(frozen=True)
class EmailMessage:
    subject: str
    html: str
    tags: Sequence[str] = ()


class EmailService:
    """Thin client for sending messages through Mailgun."""

    def __init__(
        self,
        *,
        api_key: Optional[str],
        domain: Optional[str],
        base_url: str = "https://api.mailgun.net",
        from_email: str = "ViRA <noreply@vira.local>",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key
        self.domain = domain
        self.base_url = base_url.rstrip("/")
        self.from_email = from_email
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, client: Optional[httpx.AsyncClient] = None) -> "EmailService":
        config = settings.mailgun
        return cls(
            api_key=config.api_key.get_secret_value() if config.api_key else None,
            domain=config.domain,
            base_url=config.base_url,
            from_email=config.from_email,
            client=client,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.domain)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def send(self, to: str, subject: str, html: str, tags: Sequence[str] = ()) -> str:
        """Send one message.

        Args:
            to: Recipient address
            subject: Subject line
            html: HTML body; the text part is derived from it
            tags: Mailgun tags (``o:tag``)

        Returns:
            The provider's message id

        Raises:
            EmailDeliveryError: not configured, transport failure or non-2xx answer
        """
        template = tags[0] if tags else "generic"
        if not self.is_configured:
            log_email_sent(template, to, False)
            raise EmailDeliveryError("Email service is not configured")

        data: Dict[str, Any] = {
            "from": self.from_email,
            "to": to,
            "subject": subject,
            "html": html,
            "text": html_to_text(html),
        }
        if tags:
            data["o:tag"] = list(tags)

        try:
            r = await self._client.post(
                f"{self.base_url}/v3/{self.domain}/messages",
                auth=("api", self.api_key),
                data=data,
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            log_email_sent(template, to, False)
            raise EmailDeliveryError(
                f"Mailgun send failed: {e.response.status_code}",
                provider_status=e.response.status_code,
                details=e.response.text,
            ) from e
        except (httpx.HTTPError, RuntimeError) as e:
            log_email_sent(template, to, False)
            raise EmailDeliveryError(f"Mailgun request failed: {e}") from e

        log_email_sent(template, to, True)
        try:
            message_id = str(r.json().get("id", ""))
        except ValueError:
            message_id = ""
        logger.info(f"Email '{subject}' sent to {to} (id={message_id or 'n/a'})")
        return message_id

    async def send_message(self, to: str, message: EmailMessage) -> str:
        return await self.send(to, message.subject, message.html, message.tags)


# ---------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------


def _layout(title: str, body: str) -> str:
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<h2 style="color: #1f2937;">{html_lib.escape(title)}</h2>'
        f"{body}"
        '<p style="color: #6b7280; font-size: 12px;">ViRA - Vendor Relationship Management</p>'
        "</div>"
    )


def _button(url: str, label: str) -> str:
    return (
        f'<p><a href="{html_lib.escape(url, quote=True)}" '
        'style="background: #2563eb; color: #fff; padding: 10px 18px; text-decoration: none; border-radius: 4px;">'
        f"{html_lib.escape(label)}</a></p>"
    )


def review_urgency(days_until_due: int) -> str:
    """Wording used in reminders: overdue, due tomorrow or due in N days."""
    if days_until_due < 0:
        return "overdue"
    if days_until_due <= 1:
        return "due tomorrow"
    return f"due in {days_until_due} days"


def review_assignment_email(
    *, reviewer_name: str, project_title: str, due_date: datetime, app_url: str, notes: Optional[str] = None
) -> EmailMessage:
    body = (
        f"<p>Hi {html_lib.escape(reviewer_name)},</p>"
        f"<p>You have been asked to review the project <strong>{html_lib.escape(project_title)}</strong>.</p>"
        f"<p>Please submit your rating by <strong>{due_date:%B %d, %Y}</strong>.</p>"
    )
    if notes:
        body += f"<p>Notes: {html_lib.escape(notes)}</p>"
    body += _button(f"{app_url.rstrip('/')}/rate-project", "Rate the project")
    return EmailMessage(subject=f"Review requested: {project_title}", html=_layout("New review assignment", body), tags=["review_assignment"])


def review_reminder_email(
    *, reviewer_name: str, project_title: str, due_date: datetime, days_until_due: int, app_url: str
) -> EmailMessage:
    urgency = review_urgency(days_until_due)
    body = (
        f"<p>Hi {html_lib.escape(reviewer_name)},</p>"
        f"<p>Your review of <strong>{html_lib.escape(project_title)}</strong> is {urgency} "
        f"(due {due_date:%B %d, %Y}).</p>"
        + _button(f"{app_url.rstrip('/')}/rate-project", "Complete the review")
    )
    return EmailMessage(
        subject=f"Reminder: review for {project_title} is {urgency}",
        html=_layout("Review reminder", body),
        tags=["review_reminder"],
    )


def welcome_email(*, full_name: Optional[str], email: str, temporary_password: str, app_url: str) -> EmailMessage:
    body = (
        f"<p>Hi {html_lib.escape(full_name or email)},</p>"
        "<p>An account has been created for you on ViRA.</p>"
        f"<p>Email: <strong>{html_lib.escape(email)}</strong><br/>"
        f"Temporary password: <strong>{html_lib.escape(temporary_password)}</strong></p>"
        "<p>Please change your password after signing in.</p>"
        + _button(f"{app_url.rstrip('/')}/sign-in", "Sign in")
    )
    return EmailMessage(subject="Welcome to ViRA", html=_layout("Welcome to ViRA", body), tags=["welcome"])


def vendor_invite_email(*, invite_url: str, expires_at: datetime, notes: Optional[str] = None) -> EmailMessage:
    body = (
        "<p>You have been invited to join the ViRA vendor network.</p>"
        "<p>Complete the application form to be considered for upcoming projects.</p>"
    )
    if notes:
        body += f"<p>{html_lib.escape(notes)}</p>"
    body += _button(invite_url, "Start your application")
    body += f"<p>This invitation expires on {expires_at:%B %d, %Y}.</p>"
    return EmailMessage(subject="You're invited to join ViRA", html=_layout("Vendor invitation", body), tags=["vendor_invite"])
