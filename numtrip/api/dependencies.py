"""Shared dependencies for API endpoints: admin key, bearer auth and owner guard."""
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from numtrip.config import Settings, get_settings
from numtrip.core.dependencies import get_business_repository, get_identity_provider, get_user_repository
from numtrip.core.errors import AppError, ForbiddenError, NotFoundError, UnauthorizedError
from numtrip.infrastructure.persistence import models
from numtrip.infrastructure.persistence.repositories import (
    SQLAlchemyBusinessRepository,
    SQLAlchemyUserRepository,
)

logger = logging.getLogger(__name__)


async def verify_admin_key(
    x_admin_key: str = Header(..., alias="X-Admin-Key"),
    settings: Settings = Depends(get_settings),
):
    """Verify admin key for protected endpoints.

    Args:
        x_admin_key: Admin key from X-Admin-Key header

    Raises:
        HTTPException: 500 if no key is configured, 403 if the key is wrong

    Returns:
        bool: True if key is valid
    """
    expected_key = settings.ADMIN_KEY

    if not expected_key:
        raise HTTPException(
            status_code=500,
            detail="Admin key not configured on server"
        )

    if x_admin_key != expected_key:
        raise HTTPException(
            status_code=403,
            detail="Invalid admin key"
        )

    return True


def require_identity_provider(identity_provider=Depends(get_identity_provider)):
    if identity_provider is None:
        raise AppError("Identity provider not configured", status_code=500, code="AUTH_NOT_CONFIGURED")
    return identity_provider


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    authorization: Optional[str] = Header(None),
    identity_provider=Depends(require_identity_provider),
    users: SQLAlchemyUserRepository = Depends(get_user_repository),
) -> models.User:
    """Resolve the bearer token to a local user, creating it on first sight."""
    if not authorization:
        raise UnauthorizedError("No authorization header provided")
    token = _bearer_token(authorization)
    if token is None:
        raise UnauthorizedError("Invalid token")

    identity = await identity_provider.get_user(token)
    if identity is None:
        raise UnauthorizedError("Invalid token")
    return await users.upsert_identity(identity)


async def get_optional_user(
    authorization: Optional[str] = Header(None),
    identity_provider=Depends(get_identity_provider),
    users: SQLAlchemyUserRepository = Depends(get_user_repository),
) -> Optional[models.User]:
    """Like get_current_user, but anonymous callers get None instead of 401."""
    token = _bearer_token(authorization)
    if token is None or identity_provider is None:
        return None
    identity = await identity_provider.get_user(token)
    if identity is None:
        return None
    return await users.upsert_identity(identity)


async def require_business_owner(
    business_id: str,
    user: models.User = Depends(get_current_user),
    businesses: SQLAlchemyBusinessRepository = Depends(get_business_repository),
) -> models.Business:
    """Owner guard for dashboard routes; returns the business."""
    business = await businesses.get_by_id(business_id)
    if business is None:
        raise NotFoundError("Business", business_id)
    if not business.active:
        raise ForbiddenError("Business is not active")
    if business.owner_id != user.id:
        logger.warning(f"User {user.id} denied access to business {business_id}")
        raise ForbiddenError("Access denied: You do not own this business")
    return business


def client_ip(request: Request) -> Optional[str]:
    """Caller address, honouring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
