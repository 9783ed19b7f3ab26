"""
Refresh controller.

Owns the latest merged snapshot and keeps it fresh: refresh, wait for the
configured interval, repeat. Stopping is cooperative and only observed while
waiting, so a refresh that has already started always runs to completion.
"""
from __future__ import annotations

import asyncio
from collections import Counter as TallyCounter
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from shared.config import REFRESH_INTERVAL_PRESETS, Settings, get_settings
from shared.models.catalog import ALL_SPORTS, League
from shared.models.domain import Game, LeagueFetchStatus
from shared.utils.logging import get_logger, log_context
from shared.utils.metrics import LIVE_GAMES, REFRESH_CYCLES, SNAPSHOT_GAMES
from shared.utils.preferences import PreferencesStore

from ingest.aggregator import ScoreAggregator

logger = get_logger(__name__)

UpdateListener = Callable[["RefreshController"], None]


class RefreshController:
    """
    Periodic refresh of the merged game snapshot.

    State machine: Idle -> Refreshing -> Idle. A refresh requested while one
    is running is dropped, not queued. A failed refresh keeps the previous
    snapshot and records the error.
    """

    def __init__(
        self,
        aggregator: ScoreAggregator,
        leagues: Callable[[], Iterable[League]],
        store: PreferencesStore | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._aggregator = aggregator
        self._leagues = leagues
        self._store = store
        self._settings = settings or get_settings()
        self._interval = self._settings.default_refresh_interval_s

        self.games: list[Game] = []
        self.is_loading = False
        self.last_error: Optional[Exception] = None
        self.last_updated: Optional[datetime] = None
        self.league_statuses: dict[League, LeagueFetchStatus] = {}

        self._listeners: list[UpdateListener] = []
        self._stop_event: Optional[asyncio.Event] = None
        self._tasks: list[asyncio.Task[None]] = []
        self._cycle = 0

    # ── Interval ────────────────────────────────────────────────────────

    @property
    def refresh_interval(self) -> float:
        if self._store is not None:
            return self._store.refresh_interval
        return self._interval

    def set_interval(self, seconds: float) -> None:
        """Change the auto-refresh interval; takes effect at the next wait."""
        if seconds not in REFRESH_INTERVAL_PRESETS:
            raise ValueError(f"Refresh interval must be one of {REFRESH_INTERVAL_PRESETS}, got {seconds}")
        self._interval = float(seconds)
        if self._store is not None:
            self._store.refresh_interval = seconds
        logger.info("refresh_interval_changed", interval_s=seconds)

    # ── Listeners ───────────────────────────────────────────────────────

    def add_listener(self, listener: UpdateListener) -> None:
        """Register a callback invoked after every completed refresh."""
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            try:
                listener(self)
            except Exception:
                logger.exception("refresh_listener_failed")

    # ── Refresh ─────────────────────────────────────────────────────────

    async def refresh_once(self) -> bool:
        """
        Run one aggregation cycle.

        Returns:
            False if a refresh was already running (nothing was done), True otherwise,
            whether the cycle succeeded or failed.
        """
        # check-and-set with no await in between
        if self.is_loading:
            logger.debug("refresh_skipped_in_progress")
            return False
        self.is_loading = True
        self.last_error = None
        self._cycle += 1

        with log_context(refresh_cycle=self._cycle):
            try:
                leagues = list(self._leagues())
                games = await self._aggregator.fetch_merged(leagues)
            except Exception as exc:
                self.last_error = exc
                REFRESH_CYCLES.labels(outcome="failure").inc()
                logger.error(
                    "refresh_failed",
                    error=str(exc),
                    error_type=type(exc).__name__,
                    kept_games=len(self.games),
                )
            else:
                self.games = games
                self.last_updated = datetime.now(timezone.utc)
                REFRESH_CYCLES.labels(outcome="success").inc()
                self._record_snapshot_metrics(games)
                logger.info("refresh_complete", leagues=len(leagues), games=len(games))
            finally:
                self.league_statuses = dict(self._aggregator.last_statuses)
                self.is_loading = False

        self._notify()
        return True

    @staticmethod
    def _record_snapshot_metrics(games: list[Game]) -> None:
        SNAPSHOT_GAMES.set(len(games))
        live_by_sport = TallyCounter(g.sport for g in games if g.is_live)
        for sport in ALL_SPORTS:
            LIVE_GAMES.labels(sport=sport.value).set(live_by_sport.get(sport, 0))

    # ── Auto-refresh loop ───────────────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def start(self, interval: float | None = None) -> None:
        """
        Start (or restart) auto-refresh. Must be called from a running event loop.

        A loop replaced by a restart is only asked to stop; it may still be
        finishing an in-flight refresh and is joined by wait_stopped().
        """
        if interval is not None:
            self.set_interval(interval)
        self.stop()
        stop_event = asyncio.Event()
        self._stop_event = stop_event
        self._tasks = [task for task in self._tasks if not task.done()]
        self._tasks.append(
            asyncio.get_running_loop().create_task(self._run(stop_event), name="scores-auto-refresh")
        )
        logger.info("auto_refresh_started", interval_s=self.refresh_interval)

    def stop(self) -> None:
        """Ask the running loop to exit at its next wait boundary."""
        if self._stop_event is not None and not self._stop_event.is_set():
            self._stop_event.set()
            logger.info("auto_refresh_stopping")

    async def wait_stopped(self) -> None:
        """Wait for every loop started so far to exit after stop()."""
        while self._tasks:
            await self._tasks.pop(0)

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            await self.refresh_once()
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.refresh_interval)
            except asyncio.TimeoutError:
                continue
        logger.info("auto_refresh_stopped")
