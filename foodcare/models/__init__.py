from foodcare.models.api_key import ApiKey
from foodcare.models.customer import Customer
from foodcare.models.product import Product
from foodcare.models.subscription import Frequency, Subscription, SubscriptionStatus
from foodcare.models.subscription_confirmation import (
    ConfirmationAction,
    SubscriptionConfirmation,
)

__all__ = [
    "ApiKey",
    "ConfirmationAction",
    "Customer",
    "Frequency",
    "Product",
    "Subscription",
    "SubscriptionConfirmation",
    "SubscriptionStatus",
]
