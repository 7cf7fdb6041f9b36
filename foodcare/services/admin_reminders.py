"""Admin-triggered reminders for an explicit list of subscriptions.

Unlike the scheduled sweep, the batch ignores the reminder window and reports
every subscription it could not remind as an error entry instead of skipping it.
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from foodcare.models.shared import utc_now
from foodcare.repositories.subscription_repository import SubscriptionRepository
from foodcare.schemas.admin_subscription import BulkReminderResult
from foodcare.services.email_service import ReminderMailer
from foodcare.services.errors import NotFoundError, ReminderError
from foodcare.services.reminder_issuer import ReminderIssuer

logger = logging.getLogger(__name__)


def _summary(sent: int, already_notified: int, failed: int) -> str:
    if already_notified:
        return f"Sent {sent} reminder(s), {already_notified} already notified, {failed} failed"
    return f"Sent {sent} reminder(s), {failed} failed"


class AdminReminderDispatcher:
    """Manually send reminders for a hand-picked set of subscriptions."""

    def __init__(self, db: Session, mailer: ReminderMailer | None = None):
        self.db = db
        self.subscription_repo = SubscriptionRepository(db)
        self.issuer = ReminderIssuer(db, mailer)

    async def send_manual_reminders(
        self,
        subscription_ids: Iterable[UUID],
        custom_message: str | None = None,
        now: datetime | None = None,
    ) -> BulkReminderResult:
        """Issue a reminder per subscription, collecting failures instead of stopping.

        A subscription whose reminder for the current cycle was already emailed
        counts as a success and as already notified; it is not emailed again and
        is left out of the "Sent" total.
        """
        if now is None:
            now = utc_now()

        sent = 0
        already_notified = 0
        errors: list[str] = []

        for subscription_id in dict.fromkeys(subscription_ids):
            try:
                subscription = self.subscription_repo.get_by_id(subscription_id)
                if subscription is None:
                    raise NotFoundError(f"Subscription {subscription_id} not found")
                outcome = await self.issuer.issue_for(
                    subscription, now, custom_message=custom_message
                )
            except ReminderError as e:
                self.db.rollback()
                logger.warning("Manual reminder for %s failed: %s", subscription_id, e.message)
                errors.append(e.message)
            except Exception as e:
                self.db.rollback()
                logger.exception("Error sending manual reminder for %s", subscription_id)
                errors.append(f"Failed to send reminder for subscription {subscription_id}: {e}")
            else:
                if outcome.email_dispatched:
                    sent += 1
                else:
                    already_notified += 1

        success_count = sent + already_notified
        failed_count = len(errors)
        logger.info(
            "Manual reminders: %d sent, %d already notified, %d failed",
            sent,
            already_notified,
            failed_count,
        )
        return BulkReminderResult(
            success=success_count > 0,
            success_count=success_count,
            already_notified_count=already_notified,
            failed_count=failed_count,
            errors=errors,
            message=_summary(sent, already_notified, failed_count),
        )
