"""Pydantic models for WordPress.com REST API responses."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, Field, NonNegativeInt

# The stats endpoint reports the last 30 days of visits
VIEWS_WINDOW = 30


# --- Sites ---


class Site(BaseModel):
    """One site of the authenticated account."""

    id: int = Field(alias="ID")
    url: str = Field(alias="URL")
    name: str = ""

    model_config = {"frozen": True}


class SiteList(BaseModel):
    sites: list[Site] = Field(default_factory=list)


# --- Stats ---


class StatsSummary(BaseModel):
    visitors_today: NonNegativeInt = 0
    visitors_yesterday: NonNegativeInt = 0
    views_today: NonNegativeInt = 0
    views_yesterday: NonNegativeInt = 0
    views: NonNegativeInt = 0
    visitors: NonNegativeInt = 0


class Visits(BaseModel):
    """Per-period visit rows, e.g. fields=["period", "views", "visitors"]."""

    unit: str = "day"
    fields: list[str] = Field(default_factory=list)
    data: list[list[Any]] = Field(default_factory=list)

    def column(self, name: str, fallback: int) -> list[Any]:
        """Values of one named column, in row order."""
        index = self.fields.index(name) if name in self.fields else fallback
        try:
            return [row[index] for row in self.data]
        except IndexError as exc:
            raise ValueError(f"visits row has no {name!r} column") from exc


class StatsResponse(BaseModel):
    date: str = ""
    stats: StatsSummary
    visits: Visits = Field(default_factory=Visits)

    def to_snapshot(self) -> StatsSnapshot:
        """Flatten the response into an immutable snapshot."""
        views = self.visits.column("views", fallback=1)
        return StatsSnapshot(
            date=self.date,
            views_today=self.stats.views_today,
            visitors_today=self.stats.visitors_today,
            views_yesterday=self.stats.views_yesterday,
            visitors_yesterday=self.stats.visitors_yesterday,
            views_by_day=tuple(views[-VIEWS_WINDOW:]),
        )


class StatsSnapshot(BaseModel):
    """Statistics for one site, decoded from a single stats response."""

    date: str = ""
    views_today: NonNegativeInt = 0
    visitors_today: NonNegativeInt = 0
    views_yesterday: NonNegativeInt = 0
    visitors_yesterday: NonNegativeInt = 0
    # Chronological, oldest first
    views_by_day: Annotated[
        tuple[NonNegativeInt, ...], Field(max_length=VIEWS_WINDOW)
    ] = ()

    model_config = {"frozen": True}
