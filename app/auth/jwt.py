"""
Admin session tokens.

Sessions are HS256-signed JWTs issued by the dashboard itself, so no key
set has to be fetched; the shared ``SESSION_SECRET`` verifies them.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from app.config import get_settings
from app.core.exceptions import UnauthorizedException

settings = get_settings()

HASHTAGS_WRITE = "hashtags:write"
CONTENT_WRITE = "content:write"

# Scopes implied by a role, on top of those listed in the token
ROLE_SCOPES: dict[str, set[str]] = {
    "admin": {HASHTAGS_WRITE, CONTENT_WRITE},
    "editor": {CONTENT_WRITE},
}


def create_session_token(
    user_id: str,
    email: str | None = None,
    role: str = "admin",
    scopes: list[str] | None = None,
    expires_in: timedelta = timedelta(hours=8),
) -> str:
    """
    Issue a signed admin session token.

    Args:
        user_id: Subject of the token
        email: Optional email claim
        role: Role name; see ``ROLE_SCOPES``
        scopes: Extra scopes granted explicitly
        expires_in: Lifetime of the token

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "email": email,
        "role": role,
        "scope": " ".join(scopes or []),
        "iss": settings.SESSION_ISSUER,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(claims, settings.SESSION_SECRET, algorithm=settings.SESSION_ALGORITHM)


def validate_token(token: str) -> dict[str, Any]:
    """
    Verify signature, expiry and issuer of a session token.

    Returns:
        Decoded token claims

    Raises:
        UnauthorizedException: If the token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.SESSION_SECRET,
            algorithms=[settings.SESSION_ALGORITHM],
            issuer=settings.SESSION_ISSUER,
        )
    except ExpiredSignatureError:
        raise UnauthorizedException("Session has expired")
    except JWTError as e:
        raise UnauthorizedException(f"Invalid session token: {str(e)}")

    if not payload.get("sub"):
        raise UnauthorizedException("Session token missing subject")
    return payload


def extract_user_claims(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Normalize a validated payload into user claims.

    Scopes are the union of the ``scope`` claim and the scopes implied
    by the role.
    """
    role = payload.get("role") or "viewer"
    scopes = set(payload.get("scope", "").split()) if payload.get("scope") else set()
    scopes |= ROLE_SCOPES.get(role, set())

    return {
        "user_id": payload.get("sub"),
        "email": payload.get("email"),
        "role": role,
        "scopes": sorted(scopes),
    }


def check_scope(user_claims: dict[str, Any], required_scope: str) -> bool:
    return required_scope in user_claims.get("scopes", [])
