"""API tests for /admin/subscriptions endpoints."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from foodcare.main import app
from foodcare.models.subscription import Frequency, SubscriptionStatus
from foodcare.repositories.api_key_repository import ApiKeyRepository
from foodcare.schemas.api_key import ApiKeyCreate
from foodcare.services.email_service import get_email_service
from tests.conftest import (
    NOW,
    FakeMailer,
    create_confirmation,
    create_customer,
    create_subscription,
)


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def mailer():
    fake = FakeMailer()
    app.dependency_overrides[get_email_service] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_email_service, None)


class TestAdminAuth:
    def test_revoked_key(self, client, db_session):
        repo = ApiKeyRepository(db_session)
        api_key, raw_key = repo.create(ApiKeyCreate(name="old"))
        repo.revoke(api_key.id)

        response = client.get(
            "/admin/subscriptions", headers={"Authorization": f"Bearer {raw_key}"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "API key has been revoked"

    def test_expired_key(self, client, db_session):
        _, raw_key = ApiKeyRepository(db_session).create(
            ApiKeyCreate(name="temp", expires_at=datetime.now(UTC) - timedelta(days=1))
        )

        response = client.get(
            "/admin/subscriptions", headers={"Authorization": f"Bearer {raw_key}"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "API key has expired"

    def test_malformed_header(self, client):
        response = client.get("/admin/subscriptions", headers={"Authorization": "Token abc"})
        assert response.status_code == 401


class TestSendReminders:
    def test_partial_success(self, client, db_session, admin_headers, mailer):
        active = create_subscription(db_session)
        paused = create_subscription(db_session, status=SubscriptionStatus.PAUSED)

        response = client.post(
            "/admin/subscriptions/send-reminders",
            json={
                "subscriptionIds": [str(active.id), str(paused.id)],
                "customMessage": "See you soon",
            },
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["successCount"] == 1
        assert body["data"]["failedCount"] == 1
        assert body["data"]["alreadyNotifiedCount"] == 0
        assert body["data"]["message"] == "Sent 1 reminder(s), 1 failed"
        assert str(paused.id) in body["data"]["errors"][0]
        assert mailer.sent[0]["custom_message"] == "See you soon"

    def test_empty_list_is_400(self, client, admin_headers, mailer):
        response = client.post(
            "/admin/subscriptions/send-reminders",
            json={"subscriptionIds": []},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_requires_api_key(self, client):
        response = client.post(
            "/admin/subscriptions/send-reminders",
            json={"subscriptionIds": [str(uuid.uuid4())]},
        )
        assert response.status_code == 401


class TestListSubscriptions:
    def test_filters_and_pagination(self, client, db_session, admin_headers):
        alice = create_customer(db_session, email="alice@example.com", name="Alice Tran")
        bob = create_customer(db_session, email="bob@example.com", name="Bob Le")
        for i in range(3):
            create_subscription(
                db_session, customer=alice, created_at=NOW - timedelta(hours=i)
            )
        create_subscription(
            db_session,
            customer=bob,
            status=SubscriptionStatus.PAUSED,
            frequency=Frequency.MONTHLY,
        )

        page = client.get(
            "/admin/subscriptions",
            params={"searchTerm": "ALICE", "pageSize": 2, "page": 2},
            headers=admin_headers,
        ).json()["data"]
        assert page["totalCount"] == 3
        assert page["totalPages"] == 2
        assert len(page["subscriptions"]) == 1
        assert page["subscriptions"][0]["customerName"] == "Alice Tran"

        paused = client.get(
            "/admin/subscriptions", params={"status": "paused"}, headers=admin_headers
        ).json()["data"]
        assert paused["totalCount"] == 1
        assert paused["subscriptions"][0]["customerEmail"] == "bob@example.com"
        assert paused["subscriptions"][0]["frequency"] == "monthly"

    def test_invalid_status_is_422(self, client, admin_headers):
        response = client.get(
            "/admin/subscriptions", params={"status": "deleted"}, headers=admin_headers
        )
        assert response.status_code == 422


class TestSubscriptionDetail:
    def test_detail_with_reminder_history(self, client, db_session, admin_headers):
        subscription = create_subscription(db_session)
        create_confirmation(
            db_session,
            subscription,
            token="old",
            created_at=NOW - timedelta(days=9),
            processed_at=NOW - timedelta(days=8),
            customer_response="continue",
        )
        create_confirmation(db_session, subscription, token="new", created_at=NOW)

        response = client.get(f"/admin/subscriptions/{subscription.id}", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["remindersSent"] == 2
        assert data["lastReminderSent"].startswith("2026-03-10T09:00:00")
        assert data["productName"] == "Organic Vegetable Box"
        assert data["customerName"] == "An Nguyen"

    def test_not_found(self, client, admin_headers):
        response = client.get(f"/admin/subscriptions/{uuid.uuid4()}", headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Subscription not found"}
