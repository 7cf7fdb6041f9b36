from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from foodcare.models.customer import Customer
from foodcare.models.subscription import Subscription, SubscriptionStatus
from foodcare.schemas.admin_subscription import SubscriptionFilters
from foodcare.schemas.subscription import SubscriptionCreate


class SubscriptionRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, subscription_id: UUID) -> Subscription | None:
        return self.db.query(Subscription).filter(Subscription.id == subscription_id).first()

    def get_for_customer(self, subscription_id: UUID, customer_id: UUID) -> Subscription | None:
        return (
            self.db.query(Subscription)
            .filter(
                Subscription.id == subscription_id,
                Subscription.customer_id == customer_id,
            )
            .first()
        )

    def get_by_customer_id(self, customer_id: UUID) -> list[Subscription]:
        return (
            self.db.query(Subscription)
            .filter(Subscription.customer_id == customer_id)
            .order_by(Subscription.created_at.desc())
            .all()
        )

    def get_due_for_reminder(self, window_start: date, window_end: date) -> list[Subscription]:
        """Active subscriptions whose next delivery falls inside the window."""
        return (
            self.db.query(Subscription)
            .filter(
                Subscription.status == SubscriptionStatus.ACTIVE.value,
                Subscription.next_delivery_date >= window_start,
                Subscription.next_delivery_date <= window_end,
            )
            .order_by(Subscription.next_delivery_date, Subscription.id)
            .all()
        )

    def _filtered(self, filters: SubscriptionFilters) -> "Query[Subscription]":
        query = self.db.query(Subscription)
        if filters.status is not None:
            query = query.filter(Subscription.status == filters.status.value)
        if filters.frequency is not None:
            query = query.filter(Subscription.frequency == filters.frequency.value)
        if filters.search_term:
            pattern = f"%{filters.search_term.strip().lower()}%"
            query = query.join(Customer, Customer.id == Subscription.customer_id).filter(
                or_(
                    Customer.full_name.ilike(pattern),
                    Customer.email.ilike(pattern),
                    Customer.phone_number.ilike(pattern),
                )
            )
        if filters.start_date is not None:
            query = query.filter(Subscription.start_date >= filters.start_date)
        if filters.end_date is not None:
            query = query.filter(Subscription.start_date <= filters.end_date)
        return query

    def get_all(
        self, filters: SubscriptionFilters, skip: int = 0, limit: int = 100
    ) -> list[Subscription]:
        return (
            self._filtered(filters)
            .order_by(Subscription.created_at.desc(), Subscription.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, filters: SubscriptionFilters) -> int:
        return self._filtered(filters).count()

    def create(
        self,
        data: SubscriptionCreate,
        customer_id: UUID,
        *,
        start_date: date,
        next_delivery_date: date,
        discount_percent: Decimal,
    ) -> Subscription:
        subscription = Subscription(
            customer_id=customer_id,
            product_id=data.product_id,
            frequency=data.frequency.value,
            quantity=data.quantity,
            discount_percent=discount_percent,
            status=SubscriptionStatus.ACTIVE.value,
            start_date=start_date,
            next_delivery_date=next_delivery_date,
        )
        self.db.add(subscription)
        self.db.commit()
        self.db.refresh(subscription)
        return subscription
