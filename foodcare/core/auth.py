from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from foodcare.core.config import settings
from foodcare.core.database import get_db
from foodcare.models.api_key import ApiKey
from foodcare.repositories.api_key_repository import ApiKeyRepository, hash_api_key

CUSTOMER_TOKEN_TYPE = "customer"


def _bearer_token(request: Request, missing_detail: str) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail=missing_detail)

    if not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    token = auth_header[7:]
    if not token:
        raise HTTPException(status_code=401, detail=missing_detail)
    return token


def get_current_admin(
    request: Request,
    db: Session = Depends(get_db),
) -> ApiKey:
    """Authenticate an admin by the API key in the Authorization header."""
    raw_key = _bearer_token(request, "API key is required")

    repo = ApiKeyRepository(db)
    api_key = repo.get_by_hash(hash_api_key(raw_key))

    if not api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")

    if api_key.status == "revoked":
        raise HTTPException(status_code=401, detail="API key has been revoked")

    if api_key.expires_at and api_key.expires_at.replace(tzinfo=None) < datetime.now(UTC).replace(
        tzinfo=None
    ):
        raise HTTPException(status_code=401, detail="API key has expired")

    repo.update_last_used(api_key, datetime.now(UTC))
    return api_key


def create_customer_token(customer_id: UUID, expires_in: timedelta = timedelta(hours=12)) -> str:
    """Sign a customer bearer token (used by the storefront login and in tests)."""
    payload = {
        "sub": str(customer_id),
        "type": CUSTOMER_TOKEN_TYPE,
        "exp": datetime.now(UTC) + expires_in,
    }
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def verify_customer_token(token: str) -> UUID:
    """Return the customer id carried by a token.

    Raises jwt.ExpiredSignatureError or jwt.InvalidTokenError on failure.
    """
    payload = jwt.decode(
        token, settings.AUTH_JWT_SECRET, algorithms=[settings.AUTH_JWT_ALGORITHM]
    )
    if payload.get("type") != CUSTOMER_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Invalid token type")
    return UUID(payload["sub"])


def get_current_customer(request: Request) -> UUID:
    """Validate the customer JWT in the Authorization header and return the customer id."""
    token = _bearer_token(request, "Authentication required")
    try:
        return verify_customer_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired") from None
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token") from None
