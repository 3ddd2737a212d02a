"""Tests for SiteStatsStore and DisplayModel."""

import threading

import pytest

from wordpresser.dashboard.store import (
    PLACEHOLDER_TEXT,
    SERIES_WINDOW,
    DisplayModel,
    SiteStatsStore,
)
from wordpresser.models import StatsSnapshot


@pytest.fixture
def store() -> SiteStatsStore:
    return SiteStatsStore.seeded(["c.com", "a.com", "b.com"])


class TestSiteStatsStore:
    def test_seeded_entries_are_placeholders(self, store: SiteStatsStore) -> None:
        for url in ("a.com", "b.com", "c.com"):
            assert store.get(url).description == PLACEHOLDER_TEXT
            assert store.get(url).series == ()

    def test_missing_url_returns_zero_value(self, store: SiteStatsStore) -> None:
        assert store.get("nope.com") == DisplayModel()

    def test_set_replaces_entry(self, store: SiteStatsStore) -> None:
        model = DisplayModel(description="done", series=(1, 2))
        store.set("b.com", model)
        assert store.get("b.com") is model

    def test_sorted_keys(self, store: SiteStatsStore) -> None:
        assert store.sorted_keys() == ["a.com", "b.com", "c.com"]

    def test_set_does_not_duplicate_keys(self, store: SiteStatsStore) -> None:
        store.set("a.com", DisplayModel(description="x"))
        store.set("a.com", DisplayModel(description="y"))
        assert store.sorted_keys() == ["a.com", "b.com", "c.com"]
        assert len(store) == 3

    def test_concurrent_writers_never_tear_models(self) -> None:
        """Readers only ever see one of the models a writer stored."""
        store = SiteStatsStore.seeded(["a.com"])
        m1 = DisplayModel(description="one", series=(1,) * 20)
        m2 = DisplayModel(description="two", series=(2,) * 20)
        seen: list[DisplayModel] = []
        stop = threading.Event()

        def writer(model: DisplayModel) -> None:
            for _ in range(2000):
                store.set("a.com", model)

        def reader() -> None:
            while not stop.is_set():
                seen.append(store.get("a.com"))

        threads = [threading.Thread(target=writer, args=(m,)) for m in (m1, m2)]
        read_thread = threading.Thread(target=reader)
        read_thread.start()
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        stop.set()
        read_thread.join()

        assert store.get("a.com") in (m1, m2)
        for model in seen:
            assert model in (m1, m2, DisplayModel.placeholder())

    def test_sorted_keys_strictly_ascending_during_writes(self) -> None:
        urls = [f"site{i:03d}.com" for i in range(50)]
        store = SiteStatsStore.seeded(reversed(urls))
        snapshots: list[list[str]] = []

        def writer() -> None:
            for url in urls:
                store.set(url, DisplayModel(description=url))

        t = threading.Thread(target=writer)
        t.start()
        for _ in range(100):
            snapshots.append(store.sorted_keys())
        t.join()

        for keys in snapshots:
            assert keys == sorted(set(keys))
            assert len(keys) == 50


class TestDisplayModel:
    def test_from_snapshot_keeps_trailing_window(self) -> None:
        snapshot = StatsSnapshot(
            date="2024-05-01",
            views_today=12,
            visitors_today=4,
            views_by_day=tuple(range(30)),
        )
        model = DisplayModel.from_snapshot(snapshot)
        assert len(model.series) == SERIES_WINDOW
        assert model.series == tuple(range(10, 30))

    def test_short_history_is_kept_whole(self) -> None:
        model = DisplayModel.from_snapshot(StatsSnapshot(views_by_day=(3, 4)))
        assert model.series == (3, 4)

    def test_description_lists_today_and_yesterday(self) -> None:
        snapshot = StatsSnapshot(
            date="2024-05-01",
            views_today=1234,
            visitors_today=56,
            views_yesterday=7,
            visitors_yesterday=3,
        )
        text = DisplayModel.from_snapshot(snapshot).description
        assert "Stats for 2024-05-01" in text
        assert "Today:" in text and "1,234" in text and "56" in text
        assert "Yesterday:" in text

    def test_failed_mentions_reason(self) -> None:
        model = DisplayModel.failed(RuntimeError("boom"))
        assert model.description == "Failed to fetch stats: boom"
        assert model.series == ()

    def test_failed_without_message_uses_type_name(self) -> None:
        model = DisplayModel.failed(TimeoutError())
        assert "TimeoutError" in model.description

    def test_models_are_immutable(self) -> None:
        model = DisplayModel.placeholder()
        with pytest.raises(AttributeError):
            model.description = "changed"  # type: ignore[misc]
