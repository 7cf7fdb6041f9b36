"""SubscriptionConfirmation model: one reminder token per delivery cycle."""

from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    func,
)

from foodcare.core.database import Base
from foodcare.models.shared import UUIDType, generate_uuid


class ConfirmationAction(str, Enum):
    CONTINUE = "continue"
    PAUSE = "pause"
    CANCEL = "cancel"


class SubscriptionConfirmation(Base):
    """A reminder issued to a customer before a scheduled delivery.

    ``open_slot`` is ``True`` while the token is the open one for its
    (subscription, delivery date) cycle and ``NULL`` once it has been processed
    or retired after expiry. NULLs never collide in a unique constraint, so the
    constraint below admits any number of closed tokens but only one open token
    per cycle.
    """

    __tablename__ = "subscription_confirmations"
    __table_args__ = (
        UniqueConstraint(
            "subscription_id",
            "scheduled_delivery_date",
            "open_slot",
            name="uq_subscription_confirmations_open_cycle",
        ),
        Index(
            "ix_subscription_confirmations_cycle",
            "subscription_id",
            "scheduled_delivery_date",
        ),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    subscription_id = Column(
        UUIDType,
        ForeignKey("subscriptions.id", ondelete="CASCADE"),
        nullable=False,
    )
    token = Column(String(64), nullable=False, unique=True, index=True)
    scheduled_delivery_date = Column(Date, nullable=False)
    open_slot = Column(Boolean, nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    email_sent_at = Column(DateTime(timezone=True), nullable=True)
    processed_at = Column(DateTime(timezone=True), nullable=True)
    customer_response = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
