from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from foodcare.models.shared import utc_now
from foodcare.models.subscription_confirmation import ConfirmationAction
from foodcare.repositories.reminder_stats_repository import ReminderStatsRepository
from foodcare.schemas.subscription_reminder import ReminderStats


class ReminderStatsService:
    def __init__(self, db: Session):
        self.repo = ReminderStatsRepository(db)

    def get_statistics(self, now: datetime | None = None) -> ReminderStats:
        """Reminder dashboard counters; "today" is the current UTC calendar day."""
        if now is None:
            now = utc_now()
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        responses = self.repo.count_by_response()

        return ReminderStats(
            total_active_subscriptions=self.repo.count_active_subscriptions(),
            reminders_sent_today=self.repo.count_created_between(
                day_start, day_start + timedelta(days=1)
            ),
            pending_confirmations=self.repo.count_pending(now),
            confirmed_count=responses[ConfirmationAction.CONTINUE.value],
            paused_count=responses[ConfirmationAction.PAUSE.value],
            cancelled_count=responses[ConfirmationAction.CANCEL.value],
        )
