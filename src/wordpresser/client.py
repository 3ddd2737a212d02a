"""Async HTTP client for the WordPress.com REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from wordpresser.config import Settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the API returns an error response."""

    def __init__(self, message: str, code: int, data: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.data = data or {}


class AuthError(ApiError):
    """Raised when the bearer token is missing, expired or rejected."""


class WordPressClient:
    """Async HTTP client for the WordPress.com REST API.

    Requests are made once; a failed request is reported to the caller
    and never retried.
    """

    def __init__(
        self,
        settings: Settings,
        token: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.base_url = settings.api_base.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=30.0,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> WordPressClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        logger.debug("%s %s params=%s", method, path, params)
        response = await self._client.request(method, path, params=params)

        if response.status_code == 204:
            return {}

        if response.is_success:
            body = response.json()
            logger.debug("Response %d: %s", response.status_code, body)
            return body

        code = response.status_code
        message = response.reason_phrase or "Unknown API error"
        data: dict[str, Any] = {}
        try:
            body = response.json()
        except ValueError:
            body = None
        # WordPress.com errors look like {"error": "unauthorized", "message": "..."}
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or message
            data = body

        logger.debug("Error %d on %s %s: %s", code, method, path, message)
        if code in (401, 403):
            raise AuthError(message=message, code=code, data=data)
        raise ApiError(message=message, code=code, data=data)

    async def get(
        self, path: str, *, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return await self._request("GET", path, params=params)
