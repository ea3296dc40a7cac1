"""
Security Test Suite - JWT Authentication

Tests that the centralized JWT verification in dependencies.py correctly:
- Rejects missing, malformed, expired, and wrongly signed tokens
- Accepts properly signed HS256 tokens
- Resolves the caller's role and admin flag from the claims
"""

import time

import jwt
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from conftest import ADMIN_ID, USER_ID, make_token
from marketplace.api.dependencies import (
    CurrentActor,
    OptionalActor,
    actor_from_claims,
    extract_role,
)


# ---------------------------------------------------------------------------
# Minimal app that uses the real dependency
# ---------------------------------------------------------------------------

test_app = FastAPI()


@test_app.get("/protected")
async def protected_endpoint(actor: CurrentActor):
    return {"user_id": str(actor.id), "role": actor.role, "is_admin": actor.is_admin}


@test_app.get("/public")
async def public_endpoint(actor: OptionalActor):
    return {"user_id": str(actor.id) if actor else None}


client = TestClient(test_app, raise_server_exceptions=False)


class TestJWTRejection:
    """Verify that invalid/missing JWTs are rejected with 401."""

    def test_no_auth_header(self):
        resp = client.get("/protected")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Missing authorization token"

    def test_malformed_scheme(self):
        resp = client.get("/protected", headers={"Authorization": "Basic abc123"})
        assert resp.status_code == 401

    def test_garbage_token(self):
        resp = client.get("/protected", headers={"Authorization": "Bearer not.a.jwt"})
        assert resp.status_code == 401

    def test_wrong_secret(self):
        payload = {
            "sub": str(USER_ID),
            "aud": "authenticated",
            "exp": int(time.time()) + 3600,
        }
        token = jwt.encode(payload, "some-other-secret-of-sufficient-length!!", algorithm="HS256")
        resp = client.get("/protected", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_expired_token(self):
        token = make_token(USER_ID, expires_in=-60)
        resp = client.get("/protected", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Token has expired"

    def test_wrong_audience(self):
        token = make_token(USER_ID, aud="service_role")
        resp = client.get("/protected", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_non_uuid_subject(self):
        token = make_token("not-a-uuid")
        resp = client.get("/protected", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_raw_uuid_rejected(self):
        resp = client.get("/protected", headers={"Authorization": f"Bearer {USER_ID}"})
        assert resp.status_code == 401


class TestJWTAcceptance:
    """Verify that valid JWTs are accepted and mapped to an Actor."""

    def test_valid_user_token(self):
        resp = client.get(
            "/protected", headers={"Authorization": f"Bearer {make_token(USER_ID)}"}
        )
        assert resp.status_code == 200
        assert resp.json() == {
            "user_id": str(USER_ID),
            "role": "authenticated",
            "is_admin": False,
        }

    def test_admin_token(self):
        resp = client.get(
            "/protected",
            headers={"Authorization": f"Bearer {make_token(ADMIN_ID, role='admin')}"},
        )
        assert resp.status_code == 200
        assert resp.json()["is_admin"] is True

    def test_optional_actor_anonymous(self):
        resp = client.get("/public")
        assert resp.status_code == 200
        assert resp.json() == {"user_id": None}

    def test_optional_actor_ignores_bad_token(self):
        resp = client.get("/public", headers={"Authorization": "Bearer not.a.jwt"})
        assert resp.status_code == 200
        assert resp.json() == {"user_id": None}


class TestClaims:

    def test_role_prefers_app_metadata(self):
        assert extract_role({"role": "authenticated", "app_metadata": {"role": "admin"}}) == "admin"

    def test_role_falls_back_to_top_level(self):
        assert extract_role({"role": "admin"}) == "admin"
        assert extract_role({}) == "authenticated"

    def test_actor_from_claims(self):
        actor = actor_from_claims({"sub": str(ADMIN_ID), "app_metadata": {"role": "admin"}})
        assert actor.id == ADMIN_ID
        assert actor.is_admin is True


class TestMainAppAuth:

    def test_protected_route_no_auth(self, client):
        response = client.get("/api/payment-requests")
        assert response.status_code == 401
        assert response.json()["detail"] == "Missing authorization token"

    @pytest.mark.parametrize(
        "method,path",
        [
            ("post", "/api/payment-requests/00000000-0000-0000-0000-000000000001/verify"),
            ("post", "/api/payment-requests/00000000-0000-0000-0000-000000000001/cancel"),
            ("get", "/api/user-subscriptions/check-limit"),
            ("get", "/api/advertisements/mine"),
        ],
    )
    def test_every_user_route_requires_token(self, client, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == 401
