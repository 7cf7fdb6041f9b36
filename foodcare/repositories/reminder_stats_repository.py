from datetime import datetime

from sqlalchemy import func as sa_func
from sqlalchemy.orm import Session

from foodcare.models.subscription import Subscription, SubscriptionStatus
from foodcare.models.subscription_confirmation import (
    ConfirmationAction,
    SubscriptionConfirmation,
)


class ReminderStatsRepository:
    def __init__(self, db: Session):
        self.db = db

    def count_active_subscriptions(self) -> int:
        return (
            self.db.query(sa_func.count(Subscription.id))
            .filter(Subscription.status == SubscriptionStatus.ACTIVE.value)
            .scalar()
            or 0
        )

    def count_created_between(self, start: datetime, end: datetime) -> int:
        return (
            self.db.query(sa_func.count(SubscriptionConfirmation.id))
            .filter(
                SubscriptionConfirmation.created_at >= start,
                SubscriptionConfirmation.created_at < end,
            )
            .scalar()
            or 0
        )

    def count_pending(self, now: datetime) -> int:
        return (
            self.db.query(sa_func.count(SubscriptionConfirmation.id))
            .filter(
                SubscriptionConfirmation.processed_at.is_(None),
                SubscriptionConfirmation.expires_at > now,
            )
            .scalar()
            or 0
        )

    def count_by_response(self) -> dict[str, int]:
        rows = (
            self.db.query(
                SubscriptionConfirmation.customer_response,
                sa_func.count(SubscriptionConfirmation.id),
            )
            .filter(SubscriptionConfirmation.processed_at.isnot(None))
            .group_by(SubscriptionConfirmation.customer_response)
            .all()
        )
        counts = {action.value: 0 for action in ConfirmationAction}
        for response, count in rows:
            if response in counts:
                counts[response] = int(count)
        return counts
