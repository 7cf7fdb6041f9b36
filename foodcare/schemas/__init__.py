from foodcare.schemas.admin_subscription import (
    AdminSubscriptionDetail,
    AdminSubscriptionItem,
    BulkReminderResult,
    PaginatedSubscriptions,
    SendReminderRequest,
    SubscriptionFilters,
)
from foodcare.schemas.api_key import ApiKeyCreate
from foodcare.schemas.customer import CustomerCreate
from foodcare.schemas.product import ProductCreate
from foodcare.schemas.shared import ApiModel, FailureResponse
from foodcare.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionOption,
    SubscriptionResponse,
)
from foodcare.schemas.subscription_reminder import (
    ConfirmationDetails,
    ProcessConfirmationRequest,
    ProcessConfirmationResponse,
    ReminderStats,
    SendRemindersResponse,
)

__all__ = [
    "AdminSubscriptionDetail",
    "AdminSubscriptionItem",
    "ApiKeyCreate",
    "ApiModel",
    "BulkReminderResult",
    "ConfirmationDetails",
    "CustomerCreate",
    "FailureResponse",
    "PaginatedSubscriptions",
    "ProcessConfirmationRequest",
    "ProcessConfirmationResponse",
    "ProductCreate",
    "ReminderStats",
    "SendReminderRequest",
    "SendRemindersResponse",
    "SubscriptionCreate",
    "SubscriptionFilters",
    "SubscriptionOption",
    "SubscriptionResponse",
]
