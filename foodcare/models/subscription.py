from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    func,
)

from foodcare.core.database import Base
from foodcare.models.shared import UUIDType, generate_uuid

# Wire format v1: enum values are stored and serialized verbatim.


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class Frequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class Subscription(Base):
    __tablename__ = "subscriptions"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_subscriptions_quantity_positive"),
        CheckConstraint("discount_percent >= 0", name="ck_subscriptions_discount_non_negative"),
        CheckConstraint(
            "next_delivery_date >= start_date", name="ck_subscriptions_next_after_start"
        ),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    customer_id = Column(
        UUIDType,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    product_id = Column(
        UUIDType,
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    frequency = Column(String(20), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    discount_percent = Column(Numeric(5, 2), nullable=False, default=0)
    status = Column(
        String(20), nullable=False, default=SubscriptionStatus.ACTIVE.value, index=True
    )
    start_date = Column(Date, nullable=False)
    next_delivery_date = Column(Date, nullable=False, index=True)
    pause_until = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
