"""Site and stats API operations."""

from __future__ import annotations

from wordpresser.client import WordPressClient
from wordpresser.models import Site, SiteList, StatsResponse, StatsSnapshot


async def list_sites(client: WordPressClient) -> list[Site]:
    """Fetch every site the authenticated user belongs to."""
    body = await client.get("/me/sites", params={"fields": "ID,URL,name"})
    return SiteList.model_validate(body).sites


async def get_stats(client: WordPressClient, site_id: int) -> StatsSnapshot:
    """Fetch today's, yesterday's and the last 30 days' stats for a site."""
    body = await client.get(f"/sites/{site_id}/stats")
    return StatsResponse.model_validate(body).to_snapshot()
