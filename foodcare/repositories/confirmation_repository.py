"""Repository for SubscriptionConfirmation rows.

Methods that take part in a larger unit of work (``create_open``, ``retire_expired``,
``claim``) only flush; the calling service commits or rolls back.
"""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from foodcare.models.subscription_confirmation import (
    ConfirmationAction,
    SubscriptionConfirmation,
)


class ConfirmationRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_token(self, token: str) -> SubscriptionConfirmation | None:
        return (
            self.db.query(SubscriptionConfirmation)
            .filter(SubscriptionConfirmation.token == token)
            .first()
        )

    def get_open(
        self, subscription_id: UUID, scheduled_date: date, now: datetime
    ) -> SubscriptionConfirmation | None:
        """The unexpired, unprocessed token for a delivery cycle, if any."""
        return (
            self.db.query(SubscriptionConfirmation)
            .filter(
                SubscriptionConfirmation.subscription_id == subscription_id,
                SubscriptionConfirmation.scheduled_delivery_date == scheduled_date,
                SubscriptionConfirmation.open_slot.is_(True),
                SubscriptionConfirmation.processed_at.is_(None),
                SubscriptionConfirmation.expires_at > now,
            )
            .first()
        )

    def has_processed(self, subscription_id: UUID, scheduled_date: date) -> bool:
        query = self.db.query(SubscriptionConfirmation.id).filter(
            SubscriptionConfirmation.subscription_id == subscription_id,
            SubscriptionConfirmation.scheduled_delivery_date == scheduled_date,
            SubscriptionConfirmation.processed_at.isnot(None),
        )
        return query.first() is not None

    def retire_expired(
        self,
        now: datetime,
        subscription_id: UUID | None = None,
        scheduled_date: date | None = None,
    ) -> int:
        """Release the open slot held by expired, unprocessed tokens."""
        query = self.db.query(SubscriptionConfirmation).filter(
            SubscriptionConfirmation.open_slot.is_(True),
            SubscriptionConfirmation.processed_at.is_(None),
            SubscriptionConfirmation.expires_at <= now,
        )
        if subscription_id is not None:
            query = query.filter(SubscriptionConfirmation.subscription_id == subscription_id)
        if scheduled_date is not None:
            query = query.filter(
                SubscriptionConfirmation.scheduled_delivery_date == scheduled_date
            )
        count = query.update({"open_slot": None}, synchronize_session=False)
        self.db.flush()
        return count

    def create_open(
        self,
        *,
        subscription_id: UUID,
        scheduled_date: date,
        token: str,
        created_at: datetime,
        expires_at: datetime,
    ) -> SubscriptionConfirmation:
        """Insert the open token for a cycle.

        Raises ``IntegrityError`` when another writer already holds the slot.
        """
        confirmation = SubscriptionConfirmation(
            subscription_id=subscription_id,
            token=token,
            scheduled_delivery_date=scheduled_date,
            open_slot=True,
            created_at=created_at,
            expires_at=expires_at,
        )
        self.db.add(confirmation)
        self.db.flush()
        return confirmation

    def mark_email_sent(self, confirmation: SubscriptionConfirmation, sent_at: datetime) -> None:
        confirmation.email_sent_at = sent_at  # type: ignore[assignment]
        self.db.commit()

    def claim(
        self, confirmation_id: UUID, action: ConfirmationAction, now: datetime
    ) -> bool:
        """Consume a token with a single compare-and-set on ``processed_at``.

        Returns True only for the caller whose update matched the row.
        """
        updated = (
            self.db.query(SubscriptionConfirmation)
            .filter(
                SubscriptionConfirmation.id == confirmation_id,
                SubscriptionConfirmation.processed_at.is_(None),
                SubscriptionConfirmation.expires_at >= now,
            )
            .update(
                {
                    "processed_at": now,
                    "customer_response": action.value,
                    "open_slot": None,
                },
                synchronize_session=False,
            )
        )
        return updated == 1

    def count_for_subscription(self, subscription_id: UUID) -> int:
        return (
            self.db.query(func.count(SubscriptionConfirmation.id))
            .filter(SubscriptionConfirmation.subscription_id == subscription_id)
            .scalar()
            or 0
        )

    def last_created_for_subscription(self, subscription_id: UUID) -> datetime | None:
        return (
            self.db.query(func.max(SubscriptionConfirmation.created_at))
            .filter(SubscriptionConfirmation.subscription_id == subscription_id)
            .scalar()
        )
