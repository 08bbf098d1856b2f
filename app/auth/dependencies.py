"""
Authentication dependencies for FastAPI.
Read endpoints are public; write endpoints depend on ``require_scope``.
"""

from typing import Annotated, Any

from fastapi import Depends, Header, Request

from app.auth.jwt import (
    CONTENT_WRITE,
    HASHTAGS_WRITE,
    ROLE_SCOPES,
    check_scope,
    extract_user_claims,
    validate_token,
)
from app.config import get_settings
from app.core.exceptions import ForbiddenException, UnauthorizedException

settings = get_settings()


def _dev_user() -> dict[str, Any]:
    return {
        "user_id": settings.DEV_USER_ID,
        "email": settings.DEV_USER_EMAIL,
        "role": "admin",
        "scopes": sorted(ROLE_SCOPES["admin"]),
    }


def _bearer_token(authorization: str) -> str:
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthorizedException("Invalid authorization header format")
    return parts[1]


async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> dict[str, Any]:
    """
    Dependency to get the current admin session.

    In development mode (DEV_MODE=true) a development admin is returned.
    Otherwise a Bearer session token is required.

    Raises:
        UnauthorizedException: If authentication fails
    """
    if settings.DEV_MODE:
        user_claims = _dev_user()
        request.state.user = user_claims
        return user_claims

    if not authorization:
        raise UnauthorizedException("Authorization header required")

    payload = validate_token(_bearer_token(authorization))
    user_claims = extract_user_claims(payload)
    request.state.user = user_claims
    return user_claims


def require_scope(required_scope: str):
    """
    Dependency factory to require a specific scope.

    Usage:
        @router.delete("")
        async def delete_hashtag(
            user: dict = Depends(require_scope("hashtags:write"))
        ):
            ...
    """
    async def _check_scope(
        user: dict[str, Any] = Depends(get_current_user),
    ) -> dict[str, Any]:
        if not check_scope(user, required_scope):
            raise ForbiddenException(
                f"Required scope '{required_scope}' not granted",
                details={"required_scope": required_scope, "role": user.get("role")},
            )
        return user

    return _check_scope


# Scoped dependencies
RequireHashtagWrite = Annotated[dict[str, Any], Depends(require_scope(HASHTAGS_WRITE))]
RequireContentWrite = Annotated[dict[str, Any], Depends(require_scope(CONTENT_WRITE))]
