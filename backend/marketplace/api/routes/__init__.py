# API Routes Module
from marketplace.api.routes import (
    payment_requests,
    user_subscriptions,
    subscription_plans,
    advertisements,
    uploads,
)

__all__ = [
    "payment_requests",
    "user_subscriptions",
    "subscription_plans",
    "advertisements",
    "uploads",
]
