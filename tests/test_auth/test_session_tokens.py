"""
Tests for admin session tokens and write-scope checks.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from jose import jwt

from app.auth import dependencies as auth_dependencies
from app.auth.jwt import (
    CONTENT_WRITE,
    HASHTAGS_WRITE,
    check_scope,
    create_session_token,
    extract_user_claims,
    validate_token,
)
from app.config import get_settings
from app.core.exceptions import UnauthorizedException

settings = get_settings()


class TestSessionTokens:
    """Tests for issuing and validating session tokens."""

    def test_round_trip_claims(self):
        token = create_session_token("user-1", email="a@b.c", role="editor", scopes=["hashtags:write"])

        claims = extract_user_claims(validate_token(token))

        assert claims["user_id"] == "user-1"
        assert claims["email"] == "a@b.c"
        assert claims["role"] == "editor"
        assert claims["scopes"] == [CONTENT_WRITE, HASHTAGS_WRITE]

    def test_expired_token(self):
        token = create_session_token("user-1", expires_in=timedelta(seconds=-10))

        with pytest.raises(UnauthorizedException, match="expired"):
            validate_token(token)

    def test_wrong_secret(self):
        token = jwt.encode(
            {"sub": "user-1", "iss": settings.SESSION_ISSUER},
            "not-the-secret",
            algorithm="HS256",
        )

        with pytest.raises(UnauthorizedException):
            validate_token(token)

    def test_wrong_issuer(self):
        token = jwt.encode(
            {"sub": "user-1", "iss": "someone-else"},
            settings.SESSION_SECRET,
            algorithm=settings.SESSION_ALGORITHM,
        )

        with pytest.raises(UnauthorizedException):
            validate_token(token)

    def test_missing_subject(self):
        token = jwt.encode(
            {"iss": settings.SESSION_ISSUER},
            settings.SESSION_SECRET,
            algorithm=settings.SESSION_ALGORITHM,
        )

        with pytest.raises(UnauthorizedException):
            validate_token(token)


class TestScopes:
    """Tests for role-derived scopes."""

    def test_admin_has_all_write_scopes(self):
        claims = extract_user_claims({"sub": "u", "role": "admin"})

        assert check_scope(claims, HASHTAGS_WRITE)
        assert check_scope(claims, CONTENT_WRITE)

    def test_viewer_has_none(self):
        claims = extract_user_claims({"sub": "u"})

        assert claims["role"] == "viewer"
        assert not check_scope(claims, HASHTAGS_WRITE)


@pytest.fixture
def production_auth(monkeypatch):
    """Turn off the development identity for one test."""
    monkeypatch.setattr(auth_dependencies.settings, "DEV_MODE", False)


@pytest.mark.asyncio
async def test_write_requires_token(client: AsyncClient, production_auth):
    response = await client.post("/api/v1/hashtag-colors", json={"name": "vip", "color": "#ff0000"})

    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_malformed_authorization_header(client: AsyncClient, production_auth):
    response = await client.post(
        "/api/v1/hashtag-colors",
        json={"name": "vip", "color": "#ff0000"},
        headers={"Authorization": "Token abc"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_write_requires_scope(client: AsyncClient, production_auth):
    token = create_session_token("editor-1", role="editor")

    response = await client.post(
        "/api/v1/hashtag-colors",
        json={"name": "vip", "color": "#ff0000"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


@pytest.mark.asyncio
async def test_write_with_admin_token(client: AsyncClient, production_auth):
    token = create_session_token("admin-1", role="admin")

    response = await client.post(
        "/api/v1/hashtag-colors",
        json={"name": "vip", "color": "#ff0000"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 201


@pytest.mark.asyncio
async def test_reads_are_public(client: AsyncClient, production_auth):
    response = await client.get("/api/v1/hashtag-colors")

    assert response.status_code == 200
