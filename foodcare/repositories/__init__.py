from foodcare.repositories.api_key_repository import ApiKeyRepository
from foodcare.repositories.confirmation_repository import ConfirmationRepository
from foodcare.repositories.customer_repository import CustomerRepository
from foodcare.repositories.product_repository import ProductRepository
from foodcare.repositories.reminder_stats_repository import ReminderStatsRepository
from foodcare.repositories.subscription_repository import SubscriptionRepository

__all__ = [
    "ApiKeyRepository",
    "ConfirmationRepository",
    "CustomerRepository",
    "ProductRepository",
    "ReminderStatsRepository",
    "SubscriptionRepository",
]
