"""Tests for EmailService – reminder composition, SMTP sending, and no-op behavior."""

from datetime import date
from unittest.mock import AsyncMock, patch

import pytest

from foodcare.services.email_service import EmailService, _format_date, confirmation_url


class TestHelpers:
    def test_format_date(self) -> None:
        assert _format_date(date(2025, 1, 20)) == "20/01/2025"

    def test_confirmation_url(self) -> None:
        with patch("foodcare.services.email_service.settings") as mock_settings:
            mock_settings.APP_URL = "https://shop.example.com/"
            url = confirmation_url("abc-_123")
        assert url == "https://shop.example.com/subscription/confirm?token=abc-_123"


class TestSendEmailNoop:
    @pytest.mark.asyncio
    async def test_returns_true_without_smtp_host(self) -> None:
        with (
            patch("foodcare.services.email_service.settings") as mock_settings,
            patch("aiosmtplib.send", new_callable=AsyncMock) as mock_send,
        ):
            mock_settings.SMTP_HOST = ""
            result = await EmailService().send_email("a@example.com", "Hi", "<p>Hi</p>")

        assert result is True
        mock_send.assert_not_called()


class TestSendEmailSmtp:
    @pytest.mark.asyncio
    async def test_sends_via_aiosmtplib(self) -> None:
        mock_send = AsyncMock()
        with (
            patch("foodcare.services.email_service.settings") as mock_settings,
            patch("aiosmtplib.send", mock_send),
        ):
            mock_settings.SMTP_HOST = "smtp.example.com"
            mock_settings.SMTP_PORT = 587
            mock_settings.SMTP_USERNAME = "user"
            mock_settings.SMTP_PASSWORD = "secret"
            mock_settings.SMTP_FROM_EMAIL = "no-reply@example.com"
            mock_settings.SMTP_FROM_NAME = "Food & Care"
            mock_settings.SMTP_USE_TLS = True

            result = await EmailService().send_email("a@example.com", "Hi", "<p>Hi</p>")

        assert result is True
        mock_send.assert_awaited_once()
        message = mock_send.call_args[0][0]
        assert message["To"] == "a@example.com"
        assert message["Subject"] == "Hi"
        kwargs = mock_send.call_args[1]
        assert kwargs["hostname"] == "smtp.example.com"
        assert kwargs["start_tls"] is True

    @pytest.mark.asyncio
    async def test_smtp_error_propagates(self) -> None:
        with (
            patch("foodcare.services.email_service.settings") as mock_settings,
            patch("aiosmtplib.send", AsyncMock(side_effect=OSError("refused"))),
        ):
            mock_settings.SMTP_HOST = "smtp.example.com"
            mock_settings.SMTP_USERNAME = ""
            mock_settings.SMTP_PASSWORD = ""
            with pytest.raises(OSError):
                await EmailService().send_email("a@example.com", "Hi", "<p>Hi</p>")


class TestSendSubscriptionReminder:
    @pytest.mark.asyncio
    async def test_composes_reminder(self) -> None:
        service = EmailService()
        with patch.object(service, "send_email", AsyncMock(return_value=True)) as mock_send:
            result = await service.send_subscription_reminder(
                "an@example.com",
                "An <Nguyen>",
                "Vegetable Box",
                date(2025, 1, 20),
                "tok123",
                custom_message="Holiday & schedule",
            )

        assert result is True
        kwargs = mock_send.call_args[1]
        assert kwargs["to"] == "an@example.com"
        assert kwargs["subject"] == "Upcoming delivery of Vegetable Box on 20/01/2025"
        body = kwargs["html_body"]
        assert "An &lt;Nguyen&gt;" in body
        assert "Holiday &amp; schedule" in body
        assert "token=tok123" in body

    @pytest.mark.asyncio
    async def test_without_custom_message(self) -> None:
        service = EmailService()
        with patch.object(service, "send_email", AsyncMock(return_value=True)) as mock_send:
            await service.send_subscription_reminder(
                "an@example.com", "", "Box", date(2025, 1, 20), "tok"
            )

        body = mock_send.call_args[1]["html_body"]
        assert "<em>" not in body
        assert "Dear Customer" in body
