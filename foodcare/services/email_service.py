"""Email service for sending subscription reminder emails via SMTP."""

from __future__ import annotations

import logging
from datetime import date
from email.message import EmailMessage
from html import escape
from typing import Protocol
from urllib.parse import urlencode

from foodcare.core.config import settings

logger = logging.getLogger(__name__)


class ReminderMailer(Protocol):
    """Contract the reminder issuer needs from an email sender.

    Returns True when the message was handed to the transport. Returning False
    or raising both count as a failed dispatch.
    """

    async def send_subscription_reminder(
        self,
        email: str,
        full_name: str,
        product_name: str,
        scheduled_date: date,
        token: str,
        custom_message: str | None = None,
    ) -> bool: ...


def confirmation_url(token: str) -> str:
    """Customer-facing link for a confirmation token."""
    base = settings.APP_URL.rstrip("/")
    return f"{base}/subscription/confirm?{urlencode({'token': token})}"


def _format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


class EmailService:
    """Service for sending transactional emails via SMTP."""

    async def send_email(self, to: str, subject: str, html_body: str) -> bool:
        """Send an email via SMTP.

        Args:
            to: Recipient email address.
            subject: Email subject line.
            html_body: HTML content of the email.

        Returns:
            True if sent successfully (or no-op when SMTP unconfigured).
        """
        if not settings.SMTP_HOST:
            logger.info("SMTP not configured, skipping email to %s: %s", to, subject)
            return True

        import aiosmtplib

        msg = EmailMessage()
        msg["From"] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content("Please view this email in an HTML-capable client.")
        msg.add_alternative(html_body, subtype="html")

        await aiosmtplib.send(
            msg,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME or None,
            password=settings.SMTP_PASSWORD or None,
            start_tls=settings.SMTP_USE_TLS,
        )
        logger.info("Email sent to %s: %s", to, subject)
        return True

    async def send_subscription_reminder(
        self,
        email: str,
        full_name: str,
        product_name: str,
        scheduled_date: date,
        token: str,
        custom_message: str | None = None,
    ) -> bool:
        """Send the pre-delivery reminder with continue/pause/cancel link.

        Args:
            email: Recipient address.
            full_name: Name used in the greeting.
            product_name: Subscribed product.
            scheduled_date: Delivery date the reminder concerns.
            token: Confirmation token embedded in the link.
            custom_message: Optional note from an admin, shown above the link.

        Returns:
            True if sent successfully.
        """
        link = confirmation_url(token)
        subject = f"Upcoming delivery of {product_name} on {_format_date(scheduled_date)}"

        note = ""
        if custom_message:
            note = f"<p><em>{escape(custom_message)}</em></p>"

        html_body = (
            f"<h2>Your next delivery is coming up</h2>"
            f"<p>Dear {escape(full_name or 'Customer')},</p>"
            f"<p>Your subscription for <strong>{escape(product_name)}</strong> is scheduled "
            f"for delivery on <strong>{_format_date(scheduled_date)}</strong>.</p>"
            f"{note}"
            f"<p>Would you like to continue, pause, or cancel this delivery?</p>"
            f'<p><a href="{escape(link)}">Manage this delivery</a></p>'
            f"<p>This link expires in {settings.CONFIRMATION_TOKEN_TTL_DAYS} days.</p>"
        )

        return await self.send_email(to=email, subject=subject, html_body=html_body)


def get_email_service() -> EmailService:
    """FastAPI dependency returning the mailer used by reminder endpoints."""
    return EmailService()
