import math
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from foodcare.models.customer import Customer
from foodcare.models.product import Product
from foodcare.models.subscription import Subscription
from foodcare.repositories.confirmation_repository import ConfirmationRepository
from foodcare.repositories.customer_repository import CustomerRepository
from foodcare.repositories.product_repository import ProductRepository
from foodcare.repositories.subscription_repository import SubscriptionRepository
from foodcare.schemas.admin_subscription import (
    AdminSubscriptionDetail,
    AdminSubscriptionItem,
    PaginatedSubscriptions,
    SubscriptionFilters,
)


def _item_fields(
    subscription: Subscription, customer: Customer | None, product: Product | None
) -> dict:
    return {
        "id": subscription.id,
        "customer_id": subscription.customer_id,
        "customer_name": (customer.full_name if customer else None) or "",
        "customer_email": (customer.email if customer else None) or "",
        "customer_phone": customer.phone_number if customer else None,
        "product_id": subscription.product_id,
        "product_name": product.name if product else "Unknown Product",
        "product_image": product.image_url if product else None,
        "product_price": product.base_price if product else Decimal("0"),
        "frequency": subscription.frequency,
        "quantity": subscription.quantity,
        "discount_percent": subscription.discount_percent,
        "status": subscription.status,
        "start_date": subscription.start_date,
        "next_delivery_date": subscription.next_delivery_date,
        "pause_until": subscription.pause_until,
        "created_at": subscription.created_at,
    }


class AdminSubscriptionService:
    """Read-only subscription views for the admin dashboard."""

    def __init__(self, db: Session):
        self.db = db
        self.subscription_repo = SubscriptionRepository(db)
        self.customer_repo = CustomerRepository(db)
        self.product_repo = ProductRepository(db)
        self.confirmation_repo = ConfirmationRepository(db)

    def list_subscriptions(self, filters: SubscriptionFilters) -> PaginatedSubscriptions:
        total_count = self.subscription_repo.count(filters)
        subscriptions = self.subscription_repo.get_all(
            filters,
            skip=(filters.page - 1) * filters.page_size,
            limit=filters.page_size,
        )
        customers = self.customer_repo.get_by_ids(
            list({s.customer_id for s in subscriptions})  # type: ignore[misc]
        )
        products = self.product_repo.get_by_ids(
            list({s.product_id for s in subscriptions})  # type: ignore[misc]
        )

        items = [
            AdminSubscriptionItem(
                **_item_fields(s, customers.get(s.customer_id), products.get(s.product_id))  # type: ignore[call-overload]
            )
            for s in subscriptions
        ]
        return PaginatedSubscriptions(
            subscriptions=items,
            total_count=total_count,
            page=filters.page,
            page_size=filters.page_size,
            total_pages=math.ceil(total_count / filters.page_size),
        )

    def get_subscription_detail(self, subscription_id: UUID) -> AdminSubscriptionDetail | None:
        subscription = self.subscription_repo.get_by_id(subscription_id)
        if subscription is None:
            return None

        customer = self.customer_repo.get_by_id(subscription.customer_id)  # type: ignore[arg-type]
        product = self.product_repo.get_by_id(subscription.product_id)  # type: ignore[arg-type]
        return AdminSubscriptionDetail(
            **_item_fields(subscription, customer, product),
            updated_at=subscription.updated_at,
            reminders_sent=self.confirmation_repo.count_for_subscription(subscription_id),
            last_reminder_sent=self.confirmation_repo.last_created_for_subscription(
                subscription_id
            ),
        )
