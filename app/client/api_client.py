"""
HTTP client for the dashboard API, used by the reference data caches.
"""

from typing import Any

import httpx

from app.config import get_settings
from app.core.exceptions import UpstreamException

settings = get_settings()


class DashboardClient:
    """Thin async wrapper over the public read endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.CLIENT_API_BASE_URL,
            timeout=timeout if timeout is not None else settings.CLIENT_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "DashboardClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_json(self, path: str) -> dict[str, Any]:
        """
        GET an endpoint and return its body.

        Raises:
            UpstreamException: On transport errors, non-JSON bodies, error
                statuses or ``success: false``
        """
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as e:
            raise UpstreamException(f"Request to {path} failed: {str(e)}")

        try:
            body = response.json()
        except ValueError:
            raise UpstreamException(
                f"Invalid response from {path}",
                details={"status": response.status_code},
            )

        if response.is_error or not isinstance(body, dict) or not body.get("success"):
            message = body.get("message") if isinstance(body, dict) else None
            raise UpstreamException(
                message or f"Request to {path} failed with status {response.status_code}",
                details={"status": response.status_code},
            )
        return body

    async def fetch_hashtag_colors(self) -> dict[str, str]:
        """Individual hashtag colors keyed by hashtag."""
        body = await self._get_json("/hashtag-colors")
        return {item["name"]: item["color"] for item in body.get("hashtagColors", [])}

    async def fetch_hashtag_categories(self) -> list[dict[str, Any]]:
        """Categories in display order."""
        body = await self._get_json("/hashtag-categories")
        return list(body.get("categories", []))
