"""Authentication dependencies for FastAPI endpoints."""

import logging

from collections.abc import Callable

from fastapi import Depends
from fastapi import HTTPException
from fastapi import Request
from fastapi import status

from contenttrust_api.auth.jwt_service import JWTService
from contenttrust_api.config.auth import get_auth_settings
from contenttrust_api.database.models.base import UserRole
from contenttrust_api.database.models.user import User

logger = logging.getLogger(__name__)

ROLE_HIERARCHY = {
    UserRole.MEMBER.value: 0,
    UserRole.MODERATOR.value: 1,
    UserRole.ADMIN.value: 2,
}


def _extract_token(request: Request) -> str | None:
    authorization = request.headers.get("Authorization")
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token:
            return token.strip()

    return request.cookies.get(get_auth_settings().access_cookie_name)


async def get_current_user(request: Request) -> User:
    """Get the current authenticated user from the request.

    Identity comes from the token alone; the user store belongs to the
    identity service.
    """
    access_token = _extract_token(request)
    if not access_token:
        logger.warning("No access token found in request")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token required"
        )

    claims = JWTService().decode_token(access_token)
    if claims is None:
        logger.warning("JWT token decode returned None")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        )

    return User(pk=claims.sub, role=claims.role)


# Create dependency instance to avoid function calls in defaults
get_current_user_dependency = Depends(get_current_user)


def require_role(required_role: UserRole) -> Callable:
    """Dependency factory to require a specific role or higher."""

    async def role_dependency(current_user: User = get_current_user_dependency) -> User:
        """Check if user has required role."""
        user_level = ROLE_HIERARCHY.get(current_user.role, -1)
        required_level = ROLE_HIERARCHY.get(required_role.value, 999)

        if user_level < required_level:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required role: {required_role.value}",
            )

        return current_user

    return role_dependency


require_moderator = require_role(UserRole.MODERATOR)
require_admin = require_role(UserRole.ADMIN)
