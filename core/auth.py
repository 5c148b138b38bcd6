"""
Authentication dependencies for FastAPI.

Callers present ``Authorization: Bearer <api_token>``; the token is looked
up on the ``users`` collection. Every failure is a 401.
"""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from db.models import User
from db.store import EntityStore

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    """Resolve the calling user from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Unauthorized")

    users = await EntityStore(User).filter(api_token=credentials.credentials)
    if not users:
        logger.info("Rejected request with unknown API token")
        raise _unauthorized("Unauthorized")
    return users[0]


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """
    Dependency for admin-only endpoints.

    Usage:
        @router.post("/syncGPSTrips")
        async def sync(admin: User = Depends(require_admin)):
            ...
    """
    if not current_user.is_admin:
        logger.warning("Non-admin %s called an admin endpoint", current_user.email)
        raise _unauthorized("Unauthorized - Admin access required")
    return current_user
