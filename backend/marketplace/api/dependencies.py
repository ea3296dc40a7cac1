"""
API Dependencies

FastAPI dependency injection for authentication and common services.

Security: JWT tokens are verified cryptographically, using the identity
provider's JWKS (asymmetric keys) when JWKS_URL is set, with HS256 fallback
via JWT_SECRET. Never decode without verification.
"""

import logging
from typing import Annotated, Optional
from uuid import UUID

import jwt
from jwt import PyJWKClient
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from marketplace.config.settings import get_settings
from marketplace.domain.models import Actor


logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

# PyJWKClient caches keys internally and refreshes them on rotation.
_jwks_client: Optional[PyJWKClient] = None


def _get_jwks_client(jwks_url: str) -> PyJWKClient:
    """Return a singleton PyJWKClient for the configured JWKS endpoint."""
    global _jwks_client
    if _jwks_client is None:
        _jwks_client = PyJWKClient(jwks_url, cache_keys=True)
    return _jwks_client


def _decode_options(settings) -> dict:
    required = ["exp", "sub"]
    if settings.jwt_issuer:
        required.append("iss")
    return {"require": required}


def _decode_with_jwks(token: str, settings) -> dict:
    """Verify JWT against the JWKS endpoint (ES256/RS256)."""
    client = _get_jwks_client(settings.jwks_url)
    signing_key = client.get_signing_key_from_jwt(token)
    return jwt.decode(
        token,
        signing_key.key,
        algorithms=["ES256", "RS256"],
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        options=_decode_options(settings),
    )


def _decode_with_secret(token: str, settings) -> dict:
    """Verify JWT using the HS256 shared secret."""
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=["HS256"],
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        options=_decode_options(settings),
    )


def extract_role(payload: dict) -> str:
    """Read the caller's role from ``app_metadata.role`` or a top-level ``role`` claim."""
    app_metadata = payload.get("app_metadata") or {}
    if isinstance(app_metadata, dict) and app_metadata.get("role"):
        return str(app_metadata["role"])
    return str(payload.get("role") or "authenticated")


def actor_from_claims(payload: dict) -> Actor:
    """
    Build the domain Actor from verified token claims.

    Raises:
        HTTPException 401: ``sub`` is missing or not a UUID
    """
    subject = payload.get("sub")
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user ID",
        )
    try:
        user_id = UUID(str(subject))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: malformed user ID",
        )

    role = extract_role(payload)
    return Actor(id=user_id, role=role, is_admin=role == get_settings().admin_role)


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Actor:
    """
    Verify the bearer token and return the calling Actor.

    Verification strategy (in order):
      1. JWKS, when ``JWKS_URL`` is configured.
      2. HS256 with ``JWT_SECRET``.

    Raises:
        HTTPException 401: token missing, expired, or invalid.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = credentials.credentials
    settings = get_settings()

    payload: Optional[dict] = None

    # --- Strategy 1: JWKS ---
    if settings.jwks_url:
        try:
            payload = _decode_with_jwks(token, settings)
        except jwt.ExpiredSignatureError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
            )
        except (jwt.exceptions.PyJWKClientError, jwt.InvalidTokenError) as jwks_err:
            logger.debug("JWKS verification failed, trying HS256 fallback: %s", jwks_err)

    # --- Strategy 2: HS256 ---
    if payload is None and settings.jwt_secret:
        try:
            payload = _decode_with_secret(token, settings)
        except jwt.ExpiredSignatureError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
            )
        except jwt.InvalidTokenError as e:
            logger.warning("HS256 JWT verification failed: %s", e)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or unverifiable token",
        )

    return actor_from_claims(payload)


async def get_optional_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Actor]:
    """
    Optionally resolve the caller.

    Returns ``None`` if no token is provided or it fails verification
    (for public endpoints).
    """
    if not credentials:
        return None

    try:
        return await get_current_actor(credentials)
    except HTTPException:
        return None


CurrentActor = Annotated[Actor, Depends(get_current_actor)]
OptionalActor = Annotated[Optional[Actor], Depends(get_optional_actor)]


# =============================================================================
# Re-export DB dependencies for a single import source
# Routers should import from api.dependencies, not db.dependencies directly.
# =============================================================================
from marketplace.infrastructure.db.dependencies import (  # noqa: E402, F401
    SessionDep,
    PaymentRequestServiceDep,
    SubscriptionServiceDep,
    SubscriptionPlanServiceDep,
    AdvertisementServiceDep,
    ProofStorageDep,
)
