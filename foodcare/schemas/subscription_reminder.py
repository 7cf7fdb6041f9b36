from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import Field

from foodcare.schemas.shared import ApiModel


class SendRemindersResponse(ApiModel):
    success: bool
    message: str
    sent_count: int


class ConfirmationDetails(ApiModel):
    """What a customer sees after following a reminder link."""

    subscription_id: UUID
    product_name: str
    product_image: str | None = None
    scheduled_delivery_date: date
    frequency: str
    quantity: int
    total_amount: Decimal
    expires_at: datetime
    is_expired: bool
    is_already_processed: bool
    customer_response: str | None = None


class ConfirmationDetailsResponse(ApiModel):
    success: bool = True
    data: ConfirmationDetails


class ProcessConfirmationRequest(ApiModel):
    # Untyped so that bad values reach the action parser and answer 400, not 422.
    token: Any = None
    action: Any = Field(default=None, description='"continue", "pause" or "cancel"')
    pause_until: Any = Field(default=None, description="YYYY-MM-DD, required for a pause.")


class ProcessConfirmationResponse(ApiModel):
    success: bool
    message: str
    action: str | None = None


class ReminderStats(ApiModel):
    total_active_subscriptions: int
    reminders_sent_today: int
    pending_confirmations: int
    confirmed_count: int
    paused_count: int
    cancelled_count: int


class ReminderStatsResponse(ApiModel):
    success: bool = True
    data: ReminderStats
