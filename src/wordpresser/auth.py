"""OAuth2 authorization-code flow and bearer token cache.

First run:
    the user opens the printed authorization URL, approves the app and
    pastes the ``code`` query parameter from the redirect back into the
    terminal. The code is exchanged for an access token, which is written
    to ``settings.token_file``.

Later runs:
    the cached token is read from ``settings.token_file`` directly.
"""

from __future__ import annotations

import asyncio
import logging
import os
import secrets
from collections.abc import Callable
from pathlib import Path
from urllib.parse import urlencode

import httpx
from rich.console import Console

from wordpresser.client import AuthError
from wordpresser.config import Settings

logger = logging.getLogger(__name__)

SCOPE = "global"


def load_token(path: Path) -> str | None:
    """Return the cached token, or None if there is no usable cache."""
    if not path.exists():
        return None
    token = path.read_text().strip()
    return token or None


def save_token(path: Path, token: str) -> None:
    """Write the token so the next run can skip authorization."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as f:
        f.write(token)
    logger.info("Token cached at %s", path)


def forget_token(path: Path) -> None:
    """Drop a cached token that the API rejected."""
    path.unlink(missing_ok=True)
    logger.info("Removed cached token %s", path)


def authorization_url(settings: Settings, state: str) -> str:
    """Consent page URL the user must visit to authorize the app."""
    query = urlencode({
        "client_id": settings.client_id,
        "redirect_uri": settings.redirect_uri,
        "response_type": "code",
        "scope": SCOPE,
        "state": state,
    })
    return f"{settings.oauth_base.rstrip('/')}/authorize?{query}"


async def exchange_code(
    settings: Settings,
    code: str,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Trade an authorization code for an access token."""
    async with httpx.AsyncClient(timeout=30.0, transport=transport) as client:
        response = await client.post(
            f"{settings.oauth_base.rstrip('/')}/token",
            data={
                "client_id": settings.client_id,
                "client_secret": settings.client_secret,
                "redirect_uri": settings.redirect_uri,
                "code": code,
                "grant_type": "authorization_code",
            },
        )

    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    if not response.is_success:
        message = body.get("error_description") or body.get("error") or response.reason_phrase
        raise AuthError(
            message=f"Authorization code exchange failed: {message}",
            code=response.status_code,
            data=body,
        )

    token = body.get("access_token")
    if not token:
        raise AuthError(
            message="Token endpoint response has no access_token",
            code=response.status_code,
            data=body,
        )
    return token


async def obtain_token(
    settings: Settings,
    *,
    read_code: Callable[[], str] = input,
    console: Console | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Return a bearer token, running the interactive flow if none is cached."""
    cached = load_token(settings.token_file)
    if cached is not None:
        logger.info("Using cached token from %s", settings.token_file)
        return cached

    if not settings.client_id or not settings.redirect_uri:
        raise AuthError(
            message=(
                "No cached token and WORDPRESSER_CLIENT_ID / "
                "WORDPRESSER_REDIRECT_URI are not set"
            ),
            code=0,
        )

    console = console or Console()
    url = authorization_url(settings, state=secrets.token_urlsafe(16))
    console.print("Visit the URL for the auth dialog:")
    # Unwrapped so the URL can be copied in one piece
    console.print(url, soft_wrap=True, highlight=False, markup=False)
    console.print("Paste the code from the redirect URL: ", end="")
    code = (await asyncio.to_thread(read_code)).strip()
    if not code:
        raise AuthError(message="No authorization code entered", code=0)

    token = await exchange_code(settings, code, transport=transport)
    save_token(settings.token_file, token)
    return token
