"""
Authentication dependencies for routers.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from admedia.ad_server.services.auth_service import AuthService
from admedia.common.database import get_session
from admedia.common.exceptions import AuthenticationError, PermissionDeniedError
from admedia.common.logger import get_logger, log_context
from admedia.common.security import JWTHandler
from admedia.models import User, UserRole

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session),
) -> User:
    """Resolve the bearer token to a stored user."""
    if credentials is None:
        raise AuthenticationError("No token provided")

    payload = JWTHandler().decode_access_token(credentials.credentials)
    try:
        user_id = int(payload["sub"])
    except ValueError as e:
        raise AuthenticationError("Invalid token") from e

    user = await AuthService(session).get_user(user_id)
    if user is None:
        raise AuthenticationError("User no longer exists")

    log_context(user_id=user.id)
    return user


def require_roles(*roles: UserRole) -> Callable[..., Coroutine[Any, Any, User]]:
    """Dependency factory: current user must hold one of ``roles``."""
    allowed = {role.value for role in roles}

    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            logger.warning("Access denied", user_id=user.id, role=user.role, required=sorted(allowed))
            raise PermissionDeniedError(
                "Access denied",
                details={"required_roles": sorted(allowed)},
            )
        return user

    return checker
