"""Tests for dashboard startup and a full session over fake I/O."""

import asyncio
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
from conftest import FakeScreen

from wordpresser.auth import save_token
from wordpresser.client import ApiError, AuthError, WordPressClient
from wordpresser.config import Settings
from wordpresser.dashboard.app import NoSitesError, load_sites, run_session
from wordpresser.dashboard.keys import DOWN, ESCAPE
from wordpresser.dashboard.screen import Pane
from wordpresser.models import Site

SITES = [
    Site(ID=1, URL="https://a.com"),
    Site(ID=2, URL="https://b.com"),
]


def stats_body(views: int) -> dict:
    return {
        "date": "2024-05-01",
        "stats": {"views_today": views, "visitors_today": 1},
        "visits": {
            "fields": ["period", "views", "visitors"],
            "data": [["d", views, 1] for _ in range(30)],
        },
    }


def make_client(settings: Settings, handler) -> WordPressClient:
    return WordPressClient(settings, "tok", transport=httpx.MockTransport(handler))


class ScriptedKeys:
    """Presses each key once its condition holds."""

    def __init__(self, steps: list[tuple[Callable[[], bool], str]]) -> None:
        self._steps = list(steps)

    async def read_key(self) -> str:
        condition, key = self._steps.pop(0)
        while not condition():
            await asyncio.sleep(0.005)
        return key


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(api_base="https://api.test/rest/v1.1", token_file=tmp_path / ".token")


class TestLoadSites:
    async def test_rejected_token_is_forgotten(self, settings: Settings) -> None:
        save_token(settings.token_file, "expired")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"error": "authorization_required"})

        async with make_client(settings, handler) as client:
            with pytest.raises(AuthError):
                await load_sites(client, settings)

        assert not settings.token_file.exists()

    async def test_no_sites_is_fatal(self, settings: Settings) -> None:
        handler = lambda request: httpx.Response(200, json={"sites": []})  # noqa: E731
        async with make_client(settings, handler) as client:
            with pytest.raises(NoSitesError):
                await load_sites(client, settings)

    async def test_server_error_propagates(self, settings: Settings) -> None:
        handler = lambda request: httpx.Response(500, json={"error": "oops"})  # noqa: E731
        async with make_client(settings, handler) as client:
            with pytest.raises(ApiError) as exc_info:
                await load_sites(client, settings)
        assert not isinstance(exc_info.value, AuthError)


class TestRunSession:
    async def test_stats_fill_in_and_scrolling_shows_them(self, settings: Settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/sites/1/stats"):
                return httpx.Response(200, json=stats_body(3))
            return httpx.Response(404, json={"error": "unknown_blog", "message": "Unknown blog"})

        screen = FakeScreen()
        keys = ScriptedKeys([
            (lambda: "Views: 3" in screen.detail_text, DOWN),
            (lambda: "Unknown blog" in screen.detail_text, ESCAPE),
        ])

        async with make_client(settings, handler) as client:
            await asyncio.wait_for(run_session(client, SITES, screen, keys), 2.0)

        assert screen.rows == ["https://a.com", "https://b.com"]
        assert screen.selected == 1
        assert screen.detail_title == "https://b.com"
        assert screen.detail_text == "Failed to fetch stats: Unknown blog"
        # An empty series is drawn as an empty chart, not skipped
        assert screen.series == ()
        assert "https://b.com" in screen.chart_title

    async def test_exit_before_fetches_finish(self, settings: Settings) -> None:
        release = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            await release.wait()
            return httpx.Response(200, json=stats_body(1))

        screen = FakeScreen()
        keys = ScriptedKeys([(lambda: Pane.DETAIL in screen.paints, ESCAPE)])

        async with make_client(settings, handler) as client:
            await asyncio.wait_for(run_session(client, SITES, screen, keys), 2.0)

        assert screen.detail_text == "fetching…"
