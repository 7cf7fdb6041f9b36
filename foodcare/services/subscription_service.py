"""Customer-facing subscription operations."""

import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from foodcare.models.shared import utc_now
from foodcare.models.subscription import Frequency, Subscription
from foodcare.repositories.customer_repository import CustomerRepository
from foodcare.repositories.product_repository import ProductRepository
from foodcare.repositories.subscription_repository import SubscriptionRepository
from foodcare.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionOption,
    SubscriptionResponse,
)
from foodcare.services.delivery_dates import next_delivery_date
from foodcare.services.errors import NotFoundError
from foodcare.services.subscription_state import SubscriptionStateMachine

logger = logging.getLogger(__name__)

SUBSCRIPTION_OPTIONS = [
    SubscriptionOption(
        frequency=Frequency.WEEKLY, code="weekly", label="Every week", discount_percent=15
    ),
    SubscriptionOption(
        frequency=Frequency.BIWEEKLY, code="biweekly", label="Every 2 weeks", discount_percent=12
    ),
    SubscriptionOption(
        frequency=Frequency.MONTHLY, code="monthly", label="Every month", discount_percent=10
    ),
]


def default_discount(frequency: Frequency) -> Decimal:
    for option in SUBSCRIPTION_OPTIONS:
        if option.frequency == frequency:
            return Decimal(option.discount_percent)
    return Decimal("0")


class SubscriptionService:
    def __init__(self, db: Session):
        self.db = db
        self.subscription_repo = SubscriptionRepository(db)
        self.customer_repo = CustomerRepository(db)
        self.product_repo = ProductRepository(db)
        self.state_machine = SubscriptionStateMachine()

    def get_subscription_options(self) -> list[SubscriptionOption]:
        return list(SUBSCRIPTION_OPTIONS)

    def create_subscription(
        self, data: SubscriptionCreate, customer_id: UUID, today: date | None = None
    ) -> Subscription:
        """Start an active subscription; the first delivery is one period after the start date."""
        if self.customer_repo.get_by_id(customer_id) is None:
            raise NotFoundError(f"Customer {customer_id} not found")
        if self.product_repo.get_by_id(data.product_id) is None:
            raise NotFoundError(f"Product {data.product_id} not found")

        start = data.start_date or today or utc_now().date()
        discount = (
            data.discount_percent
            if data.discount_percent is not None
            else default_discount(data.frequency)
        )
        subscription = self.subscription_repo.create(
            data,
            customer_id,
            start_date=start,
            next_delivery_date=next_delivery_date(data.frequency, start),
            discount_percent=discount,
        )
        logger.info(
            "Customer %s subscribed to product %s (%s)",
            customer_id,
            data.product_id,
            data.frequency.value,
        )
        return subscription

    def get_customer_subscriptions(self, customer_id: UUID) -> list[SubscriptionResponse]:
        subscriptions = self.subscription_repo.get_by_customer_id(customer_id)
        products = self.product_repo.get_by_ids(
            list({s.product_id for s in subscriptions})  # type: ignore[misc]
        )
        return [self.to_response(s, products.get(s.product_id)) for s in subscriptions]  # type: ignore[call-overload]

    def to_response(self, subscription: Subscription, product=None) -> SubscriptionResponse:
        if product is None:
            product = self.product_repo.get_by_id(subscription.product_id)  # type: ignore[arg-type]
        return SubscriptionResponse(
            id=subscription.id,  # type: ignore[arg-type]
            product_id=subscription.product_id,  # type: ignore[arg-type]
            product_name=str(product.name) if product is not None else "Unknown Product",
            frequency=Frequency(subscription.frequency),
            quantity=subscription.quantity,  # type: ignore[arg-type]
            discount_percent=subscription.discount_percent,  # type: ignore[arg-type]
            status=subscription.status,  # type: ignore[arg-type]
            start_date=subscription.start_date,  # type: ignore[arg-type]
            next_delivery_date=subscription.next_delivery_date,  # type: ignore[arg-type]
            pause_until=subscription.pause_until,  # type: ignore[arg-type]
            created_at=subscription.created_at,  # type: ignore[arg-type]
        )

    def _get_owned(self, subscription_id: UUID, customer_id: UUID) -> Subscription:
        subscription = self.subscription_repo.get_for_customer(subscription_id, customer_id)
        if subscription is None:
            raise NotFoundError(f"Subscription {subscription_id} not found")
        return subscription

    def pause_subscription(
        self, subscription_id: UUID, customer_id: UUID, until: date
    ) -> Subscription:
        subscription = self._get_owned(subscription_id, customer_id)
        self.state_machine.pause(subscription, until)
        self.db.commit()
        return subscription

    def resume_subscription(self, subscription_id: UUID, customer_id: UUID) -> Subscription:
        subscription = self._get_owned(subscription_id, customer_id)
        self.state_machine.resume(subscription)
        self.db.commit()
        return subscription

    def cancel_subscription(self, subscription_id: UUID, customer_id: UUID) -> Subscription:
        subscription = self._get_owned(subscription_id, customer_id)
        self.state_machine.cancel(subscription)
        self.db.commit()
        return subscription
