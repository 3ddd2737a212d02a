"""Live stats dashboard: wires the store, fetch tasks, renderer and input loop.

Startup needs the site list; any failure to get it is fatal. Once the
store is seeded with placeholders the screen is drawn immediately and
per-site stats fill in as their fetch tasks finish, in any order.
"""

from __future__ import annotations

import asyncio
import logging

from rich.console import Console

from wordpresser.api.sites import get_stats, list_sites
from wordpresser.auth import forget_token
from wordpresser.client import AuthError, WordPressClient
from wordpresser.config import Settings
from wordpresser.dashboard.coordinator import RenderCoordinator, Screen
from wordpresser.dashboard.fetcher import FetchOrchestrator
from wordpresser.dashboard.keys import TerminalKeys
from wordpresser.dashboard.loop import InteractiveLoop, KeySource
from wordpresser.dashboard.screen import RichScreen
from wordpresser.dashboard.store import SiteStatsStore
from wordpresser.models import Site, StatsSnapshot

logger = logging.getLogger(__name__)


class NoSitesError(Exception):
    """Raised when the account has no sites to show."""


async def load_sites(client: WordPressClient, settings: Settings) -> list[Site]:
    """Fetch the site list, dropping the cached token if the API rejects it."""
    try:
        sites = await list_sites(client)
    except AuthError:
        forget_token(settings.token_file)
        raise
    if not sites:
        raise NoSitesError("No sites found for this account")
    logger.info("Found %d sites", len(sites))
    return sites


async def run_session(
    client: WordPressClient,
    sites: list[Site],
    screen: Screen,
    keys: KeySource,
) -> None:
    """Run the dashboard over an open screen until the user exits."""
    store = SiteStatsStore.seeded(site.url for site in sites)
    coordinator = RenderCoordinator(store, screen)

    async def fetch(site: Site) -> StatsSnapshot:
        return await get_stats(client, site.id)

    orchestrator = FetchOrchestrator(fetch, store, coordinator.data_ready)
    render_task = asyncio.create_task(coordinator.run(), name="render-coordinator")
    input_task = asyncio.create_task(
        InteractiveLoop(keys, coordinator.submit).run(), name="input-loop",
    )
    orchestrator.start(sites)

    try:
        await asyncio.wait(
            {render_task, input_task}, return_when=asyncio.FIRST_EXCEPTION,
        )
    finally:
        for task in (render_task, input_task):
            task.cancel()
        await asyncio.gather(render_task, input_task, return_exceptions=True)
        await orchestrator.abandon()

    # Surface a crash of either task
    for task in (render_task, input_task):
        if not task.cancelled() and task.exception() is not None:
            raise task.exception()


async def run_dashboard(
    settings: Settings,
    token: str,
    *,
    console: Console | None = None,
) -> None:
    """Fetch the site list, then show the live dashboard until Escape."""
    async with WordPressClient(settings, token) as client:
        sites = await load_sites(client, settings)
        with RichScreen(console) as screen, TerminalKeys() as keys:
            await run_session(client, sites, screen, keys)
