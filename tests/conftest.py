"""Shared test fixtures for all test modules."""

import contextlib
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import foodcare.models  # noqa: F401
from foodcare.core import database as db_module
from foodcare.core.database import Base, get_db
from foodcare.models.customer import Customer
from foodcare.models.product import Product
from foodcare.models.subscription import Frequency, Subscription, SubscriptionStatus
from foodcare.models.subscription_confirmation import SubscriptionConfirmation
from foodcare.repositories.api_key_repository import ApiKeyRepository
from foodcare.routers.subscription_reminders import confirmation_rate_limiter
from foodcare.schemas.api_key import ApiKeyCreate

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)

# Fixed clock for service-level tests
NOW = datetime(2026, 3, 10, 9, 0, tzinfo=UTC)
TODAY = NOW.date()


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    confirmation_rate_limiter.reset()
    yield
    confirmation_rate_limiter.reset()


@pytest.fixture
def db_session():
    """Create a database session for direct service and repository testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def admin_headers(db_session):
    """Authorization header carrying a freshly created admin API key."""
    _, raw_key = ApiKeyRepository(db_session).create(ApiKeyCreate(name="test admin"))
    return {"Authorization": f"Bearer {raw_key}"}


class FakeMailer:
    """Records reminder emails; can be told to fail."""

    def __init__(self, result: bool = True, error: Exception | None = None):
        self.result = result
        self.error = error
        self.sent: list[dict] = []

    async def send_subscription_reminder(
        self,
        email,
        full_name,
        product_name,
        scheduled_date,
        token,
        custom_message=None,
    ):  # type: ignore[no-untyped-def]
        if self.error is not None:
            raise self.error
        self.sent.append(
            {
                "email": email,
                "full_name": full_name,
                "product_name": product_name,
                "scheduled_date": scheduled_date,
                "token": token,
                "custom_message": custom_message,
            }
        )
        return self.result


def create_customer(db_session, email: str | None = "an@example.com", name: str = "An Nguyen"):
    customer = Customer(email=email, full_name=name, phone_number="0900000000")
    db_session.add(customer)
    db_session.commit()
    db_session.refresh(customer)
    return customer


def create_product(db_session, name: str = "Organic Vegetable Box", price: str = "120.00"):
    product = Product(
        name=name, base_price=Decimal(price), image_url="https://cdn.example.com/box.png"
    )
    db_session.add(product)
    db_session.commit()
    db_session.refresh(product)
    return product


def create_subscription(
    db_session,
    customer=None,
    product=None,
    *,
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
    frequency: Frequency = Frequency.WEEKLY,
    next_delivery_date: date | None = None,
    quantity: int = 2,
    discount_percent: str = "15",
    created_at: datetime | None = None,
):
    customer = customer or create_customer(db_session)
    product = product or create_product(db_session)
    next_delivery = next_delivery_date or TODAY + timedelta(days=2)
    subscription = Subscription(
        customer_id=customer.id,
        product_id=product.id,
        frequency=frequency.value,
        quantity=quantity,
        discount_percent=Decimal(discount_percent),
        status=status.value,
        start_date=min(next_delivery, TODAY) - timedelta(days=30),
        next_delivery_date=next_delivery,
        created_at=created_at or NOW,
    )
    db_session.add(subscription)
    db_session.commit()
    db_session.refresh(subscription)
    return subscription


def create_confirmation(
    db_session,
    subscription,
    *,
    token: str = "tok-test-0001",
    created_at: datetime = NOW,
    expires_at: datetime | None = None,
    email_sent_at: datetime | None = NOW,
    processed_at: datetime | None = None,
    customer_response: str | None = None,
):
    confirmation = SubscriptionConfirmation(
        subscription_id=subscription.id,
        token=token,
        scheduled_delivery_date=subscription.next_delivery_date,
        open_slot=True if processed_at is None else None,
        created_at=created_at,
        expires_at=expires_at or created_at + timedelta(days=7),
        email_sent_at=email_sent_at,
        processed_at=processed_at,
        customer_response=customer_response,
    )
    db_session.add(confirmation)
    db_session.commit()
    db_session.refresh(confirmation)
    return confirmation
