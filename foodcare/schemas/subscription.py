from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field

from foodcare.models.subscription import Frequency, SubscriptionStatus
from foodcare.schemas.shared import ApiModel


class SubscriptionCreate(ApiModel):
    product_id: UUID
    frequency: Frequency
    quantity: int = Field(default=1, ge=1)
    discount_percent: Decimal | None = Field(
        default=None,
        ge=0,
        le=100,
        description="Defaults to the discount of the chosen frequency option.",
    )
    start_date: date | None = Field(
        default=None,
        description="First day of the subscription. Defaults to today (UTC).",
    )


class SubscriptionResponse(ApiModel):
    id: UUID
    product_id: UUID
    product_name: str
    frequency: Frequency
    quantity: int
    discount_percent: Decimal
    status: SubscriptionStatus
    start_date: date
    next_delivery_date: date
    pause_until: date | None
    created_at: datetime | None


class SubscriptionOption(ApiModel):
    """A frequency a customer can subscribe with, and its discount."""

    frequency: Frequency
    code: str
    label: str
    discount_percent: int
