"""
Authentication and authorization for the dashboard admin API.
"""

from app.auth.jwt import (
    CONTENT_WRITE,
    HASHTAGS_WRITE,
    check_scope,
    create_session_token,
    extract_user_claims,
    validate_token,
)
from app.auth.dependencies import (
    get_current_user,
    require_scope,
    RequireHashtagWrite,
    RequireContentWrite,
)

__all__ = [
    # Session tokens
    "create_session_token",
    "validate_token",
    "extract_user_claims",
    "check_scope",
    "HASHTAGS_WRITE",
    "CONTENT_WRITE",
    # Dependencies
    "get_current_user",
    "require_scope",
    # Type aliases
    "RequireHashtagWrite",
    "RequireContentWrite",
]
