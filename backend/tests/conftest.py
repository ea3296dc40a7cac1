"""
Test configuration and fixtures for the Classifieds Marketplace.

Provides shared fixtures for unit and integration tests.
"""

import os

# Settings are cached at import time, so the test environment is fixed
# before anything from the application is imported.
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-with-at-least-32-bytes!!")
os.environ.pop("JWKS_URL", None)
os.environ.pop("JWT_ISSUER", None)
os.environ.pop("DATABASE_URL", None)

import time
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import jwt
import pytest
from fastapi.testclient import TestClient

from marketplace.domain.models import Actor
from marketplace.domain.subscription import PlanDuration
from marketplace.infrastructure.db.models import (
    Advertisement,
    PaymentRequest,
    SubscriptionPlan,
    UserSubscription,
)


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

USER_ID = UUID("11111111-1111-4111-8111-111111111111")
OTHER_USER_ID = UUID("22222222-2222-4222-8222-222222222222")
ADMIN_ID = UUID("aaaaaaaa-aaaa-4aaa-8aaa-aaaaaaaaaaaa")


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def app():
    """Get the FastAPI application, with overrides cleared afterwards."""
    from marketplace.main import app
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Get synchronous test client."""
    return TestClient(app)


# =============================================================================
# Auth Fixtures
# =============================================================================

def make_token(user_id, role: str = "authenticated", expires_in: int = 3600, **claims) -> str:
    """Sign a token the way the identity provider would (HS256)."""
    from marketplace.config.settings import get_settings

    payload = {
        "sub": str(user_id),
        "aud": "authenticated",
        "exp": int(time.time()) + expires_in,
        "role": "authenticated",
        "app_metadata": {"role": role},
        **claims,
    }
    return jwt.encode(payload, get_settings().jwt_secret, algorithm="HS256")


@pytest.fixture
def mock_user_id() -> UUID:
    return USER_ID


@pytest.fixture
def auth_headers(mock_user_id):
    return {"Authorization": f"Bearer {make_token(mock_user_id)}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token(ADMIN_ID, role='admin')}"}


@pytest.fixture
def user_actor() -> Actor:
    return Actor(id=USER_ID)


@pytest.fixture
def other_actor() -> Actor:
    return Actor(id=OTHER_USER_ID)


@pytest.fixture
def admin_actor() -> Actor:
    return Actor(id=ADMIN_ID, role="admin", is_admin=True)


# =============================================================================
# Repository Mocks
# =============================================================================

def _returns_argument(obj):
    return obj


@pytest.fixture
def repos():
    """AsyncMock repositories whose save() echoes the saved instance."""
    payments = AsyncMock()
    payments.save = AsyncMock(side_effect=_returns_argument)
    payments.find.return_value = []
    payments.get_by_id.return_value = None
    payments.get_for_update.return_value = None

    subscriptions = AsyncMock()
    subscriptions.save = AsyncMock(side_effect=_returns_argument)
    subscriptions.get_active_for_user.return_value = None
    subscriptions.find.return_value = []

    plans = AsyncMock()
    plans.save = AsyncMock(side_effect=_returns_argument)
    plans.get_by_id.return_value = None
    plans.get_visible.return_value = None
    plans.get_many.return_value = {}

    advertisements = AsyncMock()
    advertisements.save = AsyncMock(side_effect=_returns_argument)
    advertisements.get_by_id.return_value = None

    return SimpleNamespace(
        payments=payments,
        subscriptions=subscriptions,
        plans=plans,
        advertisements=advertisements,
    )


# =============================================================================
# Sample Data
# =============================================================================

def make_plan(duration=PlanDuration.MONTHLY, post_limit: int = 10, **overrides) -> SubscriptionPlan:
    data = {
        "name": f"{PlanDuration(duration).value.title()} Plan",
        "price": Decimal("299.00"),
        "duration": duration,
        "post_limit": post_limit,
        "is_active": True,
        "sort_order": 1,
    }
    data.update(overrides)
    return SubscriptionPlan(**data)


def make_payment_request(plan=None, status="pending", user_id=USER_ID, **overrides) -> PaymentRequest:
    data = {
        "user_id": user_id,
        "subscription_plan_id": plan.id if plan else None,
        "amount": plan.price if plan else Decimal("0"),
        "status": status,
        "payment_method": "upi",
        "transaction_id": "TXN-ORIGINAL",
    }
    data.update(overrides)
    return PaymentRequest(**data)


def make_subscription(plan=None, user_id=USER_ID, **overrides) -> UserSubscription:
    data = {
        "user_id": user_id,
        "subscription_plan_id": plan.id if plan else uuid4(),
        "posts_used": 0,
        "posts_limit": plan.post_limit if plan else 10,
        "start_date": NOW,
        "end_date": NOW,
        "is_active": True,
    }
    data.update(overrides)
    return UserSubscription(**data)


def make_advertisement(user_id=USER_ID, **overrides) -> Advertisement:
    data = {
        "user_id": user_id,
        "title": "Two-bedroom flat for rent",
        "status": "draft",
    }
    data.update(overrides)
    return Advertisement(**data)
