"""Issue pre-delivery confirmation tokens and send reminder emails.

One open token exists per (subscription, scheduled delivery date). Repeated
sweeps and repeated admin requests reuse it, and the email for a cycle is only
sent again if the previous dispatch failed.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from foodcare.core.config import settings
from foodcare.core.tokens import generate_confirmation_token
from foodcare.models.shared import utc_now
from foodcare.models.subscription import Subscription, SubscriptionStatus
from foodcare.models.subscription_confirmation import SubscriptionConfirmation
from foodcare.repositories.confirmation_repository import ConfirmationRepository
from foodcare.repositories.customer_repository import CustomerRepository
from foodcare.repositories.product_repository import ProductRepository
from foodcare.repositories.subscription_repository import SubscriptionRepository
from foodcare.services.delivery_dates import reminder_window
from foodcare.services.email_service import EmailService, ReminderMailer
from foodcare.services.errors import DeliveryError, InvalidTransitionError

logger = logging.getLogger(__name__)


@dataclass
class ReminderOutcome:
    """Result of issuing a reminder for one subscription."""

    subscription_id: UUID
    token: str | None = None
    created: bool = False
    email_dispatched: bool = False
    skipped: bool = False


class ReminderIssuer:
    """Reuse-or-create confirmation tokens and dispatch reminder emails."""

    def __init__(self, db: Session, mailer: ReminderMailer | None = None):
        self.db = db
        self.mailer: ReminderMailer = mailer if mailer is not None else EmailService()
        self.subscription_repo = SubscriptionRepository(db)
        self.confirmation_repo = ConfirmationRepository(db)
        self.customer_repo = CustomerRepository(db)
        self.product_repo = ProductRepository(db)

    async def send_pending_reminders(self, now: datetime | None = None) -> int:
        """Scheduled sweep over active subscriptions due inside the reminder window.

        Cycles the customer already answered are skipped. Every per-item failure
        is logged and isolated.

        Returns:
            Number of subscriptions that were emailed during this sweep.
        """
        if now is None:
            now = utc_now()

        window_start, window_end = reminder_window(now.date(), settings.REMINDER_DAYS_BEFORE)
        subscriptions = self.subscription_repo.get_due_for_reminder(window_start, window_end)
        logger.info(
            "Checking %d subscriptions for reminders (deliveries %s to %s)",
            len(subscriptions),
            window_start,
            window_end,
        )

        sent_count = 0
        for subscription in subscriptions:
            subscription_id = subscription.id
            try:
                outcome = await self.issue_for(subscription, now, skip_answered=True)
            except Exception:
                self.db.rollback()
                logger.exception("Failed to send reminder for subscription %s", subscription_id)
                continue
            if outcome.email_dispatched:
                sent_count += 1

        logger.info("Sent %d reminders successfully", sent_count)
        return sent_count

    async def issue_for(
        self,
        subscription: Subscription,
        now: datetime | None = None,
        *,
        skip_answered: bool = False,
        custom_message: str | None = None,
    ) -> ReminderOutcome:
        """Issue (or reuse) the token for the subscription's next delivery and email it.

        Raises:
            InvalidTransitionError: The subscription is not active.
            DeliveryError: The email could not be sent. The token is kept and the
                next call retries the dispatch with the same token.
        """
        if now is None:
            now = utc_now()

        if subscription.status != SubscriptionStatus.ACTIVE.value:
            raise InvalidTransitionError(f"Subscription {subscription.id} is not active")

        subscription_id: UUID = subscription.id  # type: ignore[assignment]
        scheduled_date = subscription.next_delivery_date

        if skip_answered and self.confirmation_repo.has_processed(
            subscription_id, scheduled_date  # type: ignore[arg-type]
        ):
            logger.info(
                "Subscription %s already answered the reminder for %s",
                subscription_id,
                scheduled_date,
            )
            return ReminderOutcome(subscription_id=subscription_id, skipped=True)

        confirmation, created = self._obtain_confirmation(subscription, now)
        outcome = ReminderOutcome(
            subscription_id=subscription_id,
            token=str(confirmation.token),
            created=created,
        )

        if confirmation.email_sent_at is not None:
            logger.info(
                "Reminder already sent for subscription %s, reusing token", subscription_id
            )
            return outcome

        await self._dispatch(subscription, confirmation, custom_message)
        self.confirmation_repo.mark_email_sent(confirmation, now)
        outcome.email_dispatched = True
        return outcome

    def _obtain_confirmation(
        self, subscription: Subscription, now: datetime
    ) -> tuple[SubscriptionConfirmation, bool]:
        """Return (confirmation, created) for the subscription's next delivery."""
        subscription_id: UUID = subscription.id  # type: ignore[assignment]
        scheduled_date = subscription.next_delivery_date

        existing = self.confirmation_repo.get_open(
            subscription_id, scheduled_date, now  # type: ignore[arg-type]
        )
        if existing is not None:
            return existing, False

        self.confirmation_repo.retire_expired(
            now, subscription_id=subscription_id, scheduled_date=scheduled_date  # type: ignore[arg-type]
        )
        try:
            confirmation = self.confirmation_repo.create_open(
                subscription_id=subscription_id,
                scheduled_date=scheduled_date,  # type: ignore[arg-type]
                token=generate_confirmation_token(),
                created_at=now,
                expires_at=now + timedelta(days=settings.CONFIRMATION_TOKEN_TTL_DAYS),
            )
            self.db.commit()
        except IntegrityError:
            # A concurrent issuer holds the open slot for this cycle; use its token.
            self.db.rollback()
            existing = self.confirmation_repo.get_open(
                subscription_id, scheduled_date, now  # type: ignore[arg-type]
            )
            if existing is None:
                raise
            logger.info("Reusing concurrently issued token for subscription %s", subscription_id)
            return existing, False

        logger.info(
            "Issued confirmation token for subscription %s, delivery %s",
            subscription_id,
            scheduled_date,
        )
        return confirmation, True

    async def _dispatch(
        self,
        subscription: Subscription,
        confirmation: SubscriptionConfirmation,
        custom_message: str | None,
    ) -> None:
        customer = self.customer_repo.get_by_id(subscription.customer_id)  # type: ignore[arg-type]
        if customer is None or not customer.email:
            raise DeliveryError(f"Subscription {subscription.id} has no customer email address")

        product = self.product_repo.get_by_id(subscription.product_id)  # type: ignore[arg-type]
        if product is None:
            raise DeliveryError(f"Product for subscription {subscription.id} not found")

        try:
            sent = await self.mailer.send_subscription_reminder(
                str(customer.email),
                str(customer.full_name or "Customer"),
                str(product.name),
                confirmation.scheduled_delivery_date,  # type: ignore[arg-type]
                str(confirmation.token),
                custom_message=custom_message,
            )
        except Exception as exc:
            raise DeliveryError(
                f"Failed to send reminder email for subscription {subscription.id}: {exc}"
            ) from exc

        if not sent:
            raise DeliveryError(f"Failed to send reminder email for subscription {subscription.id}")

        logger.info("Sent reminder for subscription %s to %s", subscription.id, customer.email)
