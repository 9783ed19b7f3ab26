"""
Scores service for Sports Scores.
The single object a presentation layer talks to: it wires the feed provider,
aggregator, refresh controller and selection state together and exposes the
snapshot, its derived views, and the user's actions.
"""
from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any, Optional

from shared.config import Settings, get_settings
from shared.models.catalog import League, Sport
from shared.models.domain import Game, LeagueFetchStatus
from shared.utils.logging import get_logger
from shared.utils.preferences import PreferencesStore

from ingest.aggregator import ScoreAggregator
from ingest.providers.base import BaseFeedProvider
from ingest.providers.espn import ESPNFeedProvider
from scheduler.refresh import RefreshController, UpdateListener
from selection.sidebar import SidebarFilter, apply_sidebar_filter
from selection.state import SelectionState

logger = get_logger(__name__)


class ScoresService:
    """
    Presentation-boundary facade.

    Refreshes fetch only the leagues currently enabled in the selection, so a
    toggle takes effect on the next cycle.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        provider: BaseFeedProvider | None = None,
        store: PreferencesStore | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._provider = provider or ESPNFeedProvider(self._settings)
        self._store = store or PreferencesStore(
            self._settings.preferences_path,
            default_refresh_interval_s=self._settings.default_refresh_interval_s,
        )
        self.selection = SelectionState(self._store)
        self.aggregator = ScoreAggregator(self._provider)
        self.controller = RefreshController(
            self.aggregator,
            leagues=lambda: self.selection.active_leagues,
            store=self._store,
            settings=self._settings,
        )

    # ── Lifecycle ───────────────────────────────────────────────────────

    async def start(self) -> None:
        """Open the feed client."""
        await self._provider.start()

    async def close(self) -> None:
        """Stop auto-refresh, wait for the loop to finish, close the feed client."""
        self.controller.stop()
        await self.controller.wait_stopped()
        await self._provider.close()

    async def __aenter__(self) -> "ScoresService":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ── Snapshot state ──────────────────────────────────────────────────

    @property
    def games(self) -> list[Game]:
        return self.controller.games

    @property
    def is_loading(self) -> bool:
        return self.controller.is_loading

    @property
    def last_error(self) -> Optional[Exception]:
        return self.controller.last_error

    @property
    def last_updated(self) -> Optional[datetime]:
        return self.controller.last_updated

    @property
    def league_statuses(self) -> dict[League, LeagueFetchStatus]:
        return self.controller.league_statuses

    @property
    def refresh_interval(self) -> float:
        return self.controller.refresh_interval

    # ── Derived views ───────────────────────────────────────────────────

    @property
    def filtered_games(self) -> list[Game]:
        return self.selection.filtered(self.games)

    @property
    def live_games(self) -> list[Game]:
        return self.selection.live_games(self.games)

    def today_games(self, now: datetime | None = None, tz: tzinfo | None = None) -> list[Game]:
        return self.selection.today_games(self.games, now=now, tz=tz)

    def tomorrow_games(self, now: datetime | None = None, tz: tzinfo | None = None) -> list[Game]:
        return self.selection.tomorrow_games(self.games, now=now, tz=tz)

    @property
    def upcoming_games(self) -> list[Game]:
        return self.selection.upcoming_games(self.games)

    @property
    def completed_games(self) -> list[Game]:
        return self.selection.completed_games(self.games)

    @property
    def games_by_league(self) -> dict[League, list[Game]]:
        return self.selection.games_by_league(self.games)

    @property
    def games_by_sport(self) -> dict[Sport, list[Game]]:
        return self.selection.games_by_sport(self.games)

    def sidebar_games(
        self, sidebar: SidebarFilter, now: datetime | None = None, tz: tzinfo | None = None
    ) -> list[Game]:
        return apply_sidebar_filter(self.selection, self.games, sidebar, now=now, tz=tz)

    # ── Actions ─────────────────────────────────────────────────────────

    async def refresh(self) -> bool:
        return await self.controller.refresh_once()

    def start_auto_refresh(self, interval: float | None = None) -> None:
        self.controller.start(interval)

    def stop_auto_refresh(self) -> None:
        self.controller.stop()

    def set_refresh_interval(self, seconds: float) -> None:
        self.controller.set_interval(seconds)

    def add_listener(self, listener: UpdateListener) -> None:
        self.controller.add_listener(listener)

    def toggle_sport(self, sport: Sport) -> None:
        self.selection.toggle_sport(sport)
        logger.info("sport_toggled", sport=sport.value, enabled=sport in self.selection.selected_sports)

    def toggle_league(self, league: League) -> None:
        self.selection.toggle_league(league)
        logger.info("league_toggled", league=league.value, enabled=league in self.selection.selected_leagues)

    def set_show_live_only(self, value: bool) -> None:
        self.selection.set_show_live_only(value)

    def set_search_text(self, text: str) -> None:
        self.selection.set_search_text(text)
