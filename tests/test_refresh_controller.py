"""
Unit tests for the refresh controller: snapshot replacement, error retention,
overlap rejection, interval presets and the cooperative auto-refresh loop.

Run: pytest tests/test_refresh_controller.py -v
"""
from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from scheduler.refresh import RefreshController
from shared.config import Settings
from shared.errors import AggregationError
from shared.models.catalog import League
from shared.utils.preferences import PreferencesStore


@pytest.fixture
def aggregator() -> MagicMock:
    agg = MagicMock()
    agg.fetch_merged = AsyncMock(return_value=[])
    agg.last_statuses = {}
    return agg


@pytest.fixture
def store(settings: Settings) -> PreferencesStore:
    return PreferencesStore(settings.preferences_path)


@pytest.fixture
def controller(aggregator: MagicMock, store: PreferencesStore, settings: Settings) -> RefreshController:
    return RefreshController(aggregator, leagues=lambda: [League.NFL, League.NBA], store=store, settings=settings)


# ── refresh_once ────────────────────────────────────────────────────────

class TestRefreshOnce:

    @pytest.mark.asyncio
    async def test_success_replaces_snapshot(self, controller, aggregator, make_game) -> None:
        games = [make_game("1"), make_game("2")]
        aggregator.fetch_merged.return_value = games

        assert await controller.refresh_once() is True

        assert controller.games == games
        assert controller.last_updated is not None
        assert controller.last_error is None
        assert controller.is_loading is False
        aggregator.fetch_merged.assert_awaited_once_with([League.NFL, League.NBA])

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_snapshot(self, controller, aggregator, make_game) -> None:
        aggregator.fetch_merged.return_value = [make_game("1")]
        await controller.refresh_once()
        first_update = controller.last_updated

        error = AggregationError({League.NFL: "HTTP error: 500", League.NBA: "HTTP error: 500"})
        aggregator.fetch_merged.side_effect = error
        await controller.refresh_once()

        assert [g.id for g in controller.games] == ["1"]
        assert controller.last_error is error
        assert controller.last_updated == first_update
        assert controller.is_loading is False

    @pytest.mark.asyncio
    async def test_error_cleared_on_next_success(self, controller, aggregator) -> None:
        aggregator.fetch_merged.side_effect = RuntimeError("merge blew up")
        await controller.refresh_once()
        assert controller.last_error is not None

        aggregator.fetch_merged.side_effect = None
        aggregator.fetch_merged.return_value = []
        await controller.refresh_once()
        assert controller.last_error is None

    @pytest.mark.asyncio
    async def test_overlapping_refresh_is_rejected(self, controller, aggregator) -> None:
        gate = asyncio.Event()

        async def slow_fetch(leagues):
            await gate.wait()
            return []

        aggregator.fetch_merged.side_effect = slow_fetch

        first = asyncio.create_task(controller.refresh_once())
        await asyncio.sleep(0)
        assert controller.is_loading is True

        assert await controller.refresh_once() is False
        gate.set()
        assert await first is True
        assert aggregator.fetch_merged.await_count == 1

    @pytest.mark.asyncio
    async def test_listeners_notified(self, controller, aggregator) -> None:
        seen: list[int] = []
        controller.add_listener(lambda c: seen.append(len(c.games)))
        controller.add_listener(lambda c: 1 / 0)

        await controller.refresh_once()
        assert seen == [0]

    @pytest.mark.asyncio
    async def test_league_statuses_copied(self, controller, aggregator) -> None:
        aggregator.last_statuses = {League.NFL: MagicMock(success=False)}
        await controller.refresh_once()
        assert League.NFL in controller.league_statuses


# ── Interval ────────────────────────────────────────────────────────────

class TestInterval:

    def test_default_is_thirty_seconds(self, controller) -> None:
        assert controller.refresh_interval == 30.0

    def test_preset_is_persisted(self, controller, settings: Settings) -> None:
        controller.set_interval(60)
        assert controller.refresh_interval == 60.0
        assert PreferencesStore(settings.preferences_path).refresh_interval == 60.0

    @pytest.mark.parametrize("seconds", [0, 10, 45, 3600])
    def test_non_preset_rejected(self, controller, seconds: float) -> None:
        with pytest.raises(ValueError):
            controller.set_interval(seconds)

    def test_without_store_uses_settings(self, aggregator, settings: Settings) -> None:
        controller = RefreshController(aggregator, leagues=list, settings=settings)
        controller.set_interval(15)
        assert controller.refresh_interval == 15.0


# ── Auto-refresh loop ───────────────────────────────────────────────────

class TestAutoRefresh:

    @pytest.mark.asyncio
    async def test_stop_exits_at_wait_boundary(self, controller, aggregator) -> None:
        controller.start()
        await asyncio.sleep(0.01)
        assert controller.is_running
        assert aggregator.fetch_merged.await_count == 1

        controller.stop()
        await asyncio.wait_for(controller.wait_stopped(), timeout=1.0)
        assert not controller.is_running
        assert aggregator.fetch_merged.await_count == 1

    @pytest.mark.asyncio
    async def test_stop_does_not_interrupt_inflight_refresh(self, controller, aggregator, make_game) -> None:
        gate = asyncio.Event()

        async def slow_fetch(leagues):
            await gate.wait()
            return [make_game("late")]

        aggregator.fetch_merged.side_effect = slow_fetch
        controller.start()
        await asyncio.sleep(0.01)
        controller.stop()
        gate.set()
        await asyncio.wait_for(controller.wait_stopped(), timeout=1.0)

        assert [g.id for g in controller.games] == ["late"]

    @pytest.mark.asyncio
    async def test_restart_during_refresh_joins_old_loop(self, controller, aggregator, make_game) -> None:
        gate = asyncio.Event()

        async def slow_fetch(leagues):
            await gate.wait()
            return [make_game("late")]

        aggregator.fetch_merged.side_effect = slow_fetch
        controller.start()
        await asyncio.sleep(0.01)
        assert controller.is_loading

        controller.start()
        await asyncio.sleep(0.01)
        controller.stop()

        waiter = asyncio.create_task(controller.wait_stopped())
        await asyncio.sleep(0.01)
        assert not waiter.done()

        gate.set()
        await asyncio.wait_for(waiter, timeout=1.0)
        assert not controller.is_running
        assert not controller.is_loading
        assert [g.id for g in controller.games] == ["late"]

    @pytest.mark.asyncio
    async def test_restart_replaces_loop(self, controller, aggregator) -> None:
        controller.start()
        await asyncio.sleep(0.01)
        controller.start(interval=15)
        await asyncio.sleep(0.01)

        assert controller.refresh_interval == 15.0
        assert aggregator.fetch_merged.await_count == 2

        controller.stop()
        await asyncio.wait_for(controller.wait_stopped(), timeout=1.0)
