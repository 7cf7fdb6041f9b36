from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field

from foodcare.models.subscription import Frequency, SubscriptionStatus
from foodcare.schemas.shared import ApiModel


class SendReminderRequest(ApiModel):
    subscription_ids: list[UUID] = Field(default_factory=list)
    custom_message: str | None = Field(default=None, max_length=2000)


class BulkReminderResult(ApiModel):
    success: bool
    success_count: int
    already_notified_count: int = 0
    failed_count: int
    errors: list[str]
    message: str


class SendReminderResponse(ApiModel):
    success: bool
    data: BulkReminderResult


class SubscriptionFilters(ApiModel):
    status: SubscriptionStatus | None = None
    frequency: Frequency | None = None
    search_term: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=200)


class AdminSubscriptionItem(ApiModel):
    id: UUID
    customer_id: UUID
    customer_name: str
    customer_email: str
    customer_phone: str | None = None
    product_id: UUID
    product_name: str
    product_image: str | None = None
    product_price: Decimal
    frequency: str
    quantity: int
    discount_percent: Decimal
    status: str
    start_date: date
    next_delivery_date: date
    pause_until: date | None = None
    created_at: datetime | None = None


class AdminSubscriptionDetail(AdminSubscriptionItem):
    updated_at: datetime | None = None
    reminders_sent: int
    last_reminder_sent: datetime | None = None


class PaginatedSubscriptions(ApiModel):
    subscriptions: list[AdminSubscriptionItem]
    total_count: int
    page: int
    page_size: int
    total_pages: int


class AdminSubscriptionListResponse(ApiModel):
    success: bool = True
    data: PaginatedSubscriptions


class AdminSubscriptionDetailResponse(ApiModel):
    success: bool = True
    data: AdminSubscriptionDetail
