"""FetchOrchestrator: one stats task per site, results published to the store."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

import httpx

from wordpresser.client import ApiError
from wordpresser.dashboard.store import DisplayModel, SiteStatsStore
from wordpresser.models import Site, StatsSnapshot

logger = logging.getLogger(__name__)

FetchStats = Callable[[Site], Awaitable[StatsSnapshot]]


class FetchOrchestrator:
    """Fans out one fire-and-forget fetch task per site.

    Each task only writes its own site's entry in the store and then calls
    ``notify(url)``. Tasks never touch the screen.
    """

    def __init__(
        self,
        fetch_stats: FetchStats,
        store: SiteStatsStore,
        notify: Callable[[str], None],
    ) -> None:
        self._fetch_stats = fetch_stats
        self._store = store
        self._notify = notify
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    def start(self, sites: Iterable[Site]) -> list[asyncio.Task[None]]:
        """Launch a task per site and return without waiting for any of them."""
        launched: list[asyncio.Task[None]] = []
        for site in sites:
            task = asyncio.create_task(self._fetch_one(site), name=f"fetch-{site.id}")
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            launched.append(task)
        logger.info("Launched %d fetch tasks", len(launched))
        return launched

    async def abandon(self) -> None:
        """Cancel fetches still in flight (shutdown only)."""
        tasks = [task for task in self._tasks if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            logger.info("Abandoning %d unfinished fetches", len(tasks))
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _fetch_one(self, site: Site) -> None:
        try:
            snapshot = await self._fetch_stats(site)
        except (ApiError, httpx.HTTPError, ValueError) as exc:
            logger.warning("Stats fetch failed for %s: %s", site.url, exc)
            model = DisplayModel.failed(exc)
        except Exception as exc:
            logger.exception("Unexpected error fetching stats for %s", site.url)
            model = DisplayModel.failed(exc)
        else:
            logger.info("Stats fetched for %s", site.url)
            model = DisplayModel.from_snapshot(snapshot)

        self._store.set(site.url, model)
        self._notify(site.url)
