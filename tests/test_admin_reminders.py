"""Tests for AdminReminderDispatcher manual batches."""

import uuid
from datetime import timedelta

import pytest

from foodcare.models.subscription import SubscriptionStatus
from foodcare.models.subscription_confirmation import SubscriptionConfirmation
from foodcare.services.admin_reminders import AdminReminderDispatcher
from tests.conftest import NOW, TODAY, FakeMailer, create_customer, create_subscription


class TestSendManualReminders:
    @pytest.mark.asyncio
    async def test_paused_subscription_is_reported(self, db_session):
        s1 = create_subscription(db_session)
        s2 = create_subscription(db_session, status=SubscriptionStatus.PAUSED)
        mailer = FakeMailer()

        result = await AdminReminderDispatcher(db_session, mailer).send_manual_reminders(
            [s1.id, s2.id], now=NOW
        )

        assert result.success is True
        assert result.success_count == 1
        assert result.failed_count == 1
        assert len(result.errors) == 1
        assert str(s2.id) in result.errors[0]
        assert result.message == "Sent 1 reminder(s), 1 failed"
        assert len(mailer.sent) == 1

    @pytest.mark.asyncio
    async def test_missing_subscription(self, db_session):
        missing = uuid.uuid4()

        result = await AdminReminderDispatcher(db_session, FakeMailer()).send_manual_reminders(
            [missing], now=NOW
        )

        assert result.success is False
        assert result.errors == [f"Subscription {missing} not found"]

    @pytest.mark.asyncio
    async def test_duplicate_ids_processed_once(self, db_session):
        subscription = create_subscription(db_session)
        mailer = FakeMailer()

        result = await AdminReminderDispatcher(db_session, mailer).send_manual_reminders(
            [subscription.id, subscription.id, subscription.id], now=NOW
        )

        assert result.success_count == 1
        assert result.already_notified_count == 0
        assert result.failed_count == 0
        assert len(mailer.sent) == 1
        assert result.message == "Sent 1 reminder(s), 0 failed"
        assert db_session.query(SubscriptionConfirmation).count() == 1

    @pytest.mark.asyncio
    async def test_not_yet_due_subscription_can_be_reminded(self, db_session):
        subscription = create_subscription(
            db_session, next_delivery_date=TODAY + timedelta(days=20)
        )
        mailer = FakeMailer()

        result = await AdminReminderDispatcher(db_session, mailer).send_manual_reminders(
            [subscription.id], custom_message="We are changing suppliers", now=NOW
        )

        assert result.success_count == 1
        assert mailer.sent[0]["custom_message"] == "We are changing suppliers"
        assert mailer.sent[0]["scheduled_date"] == TODAY + timedelta(days=20)

    @pytest.mark.asyncio
    async def test_repeat_request_reuses_token_without_new_email(self, db_session):
        subscription = create_subscription(db_session)
        mailer = FakeMailer()
        dispatcher = AdminReminderDispatcher(db_session, mailer)

        await dispatcher.send_manual_reminders([subscription.id], now=NOW)
        result = await dispatcher.send_manual_reminders(
            [subscription.id], now=NOW + timedelta(hours=1)
        )

        assert result.success_count == 1
        assert result.already_notified_count == 1
        assert result.success is True
        assert result.message == "Sent 0 reminder(s), 1 already notified, 0 failed"
        assert len(mailer.sent) == 1

    @pytest.mark.asyncio
    async def test_mailer_error_is_recorded_and_batch_continues(self, db_session):
        no_email = create_subscription(
            db_session, customer=create_customer(db_session, email=None)
        )
        good = create_subscription(db_session)
        mailer = FakeMailer()

        result = await AdminReminderDispatcher(db_session, mailer).send_manual_reminders(
            [no_email.id, good.id], now=NOW
        )

        assert result.success_count == 1
        assert result.failed_count == 1
        assert str(no_email.id) in result.errors[0]

    @pytest.mark.asyncio
    async def test_unexpected_error_message(self, db_session):
        subscription = create_subscription(db_session)
        mailer = FakeMailer(error=RuntimeError("boom"))

        result = await AdminReminderDispatcher(db_session, mailer).send_manual_reminders(
            [subscription.id], now=NOW
        )

        assert result.failed_count == 1
        assert "boom" in result.errors[0]
        assert str(subscription.id) in result.errors[0]
