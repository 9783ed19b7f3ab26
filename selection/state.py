"""
Selection and filter state.

Holds which sports and leagues the user has enabled plus the live-only and
free-text filters, and derives views from a game snapshot. Nothing here does
I/O except persisting the league selection after a toggle.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Iterable, Optional, Sequence

from shared.models.catalog import ALL_LEAGUES, ALL_SPORTS, League, Sport
from shared.models.domain import Game
from shared.utils.logging import get_logger
from shared.utils.preferences import PreferencesStore

logger = get_logger(__name__)


def _local_today(now: datetime | None, tz: tzinfo | None) -> date:
    return (now or datetime.now(timezone.utc)).astimezone(tz).date()


class SelectionState:
    """
    User's sport/league selection and filters.

    Sports and leagues are co-dependent: toggling a sport toggles all of its
    leagues, and after a league toggle a sport is enabled when all of its
    leagues are, disabled when none are, and left alone otherwise.
    """

    def __init__(
        self,
        store: PreferencesStore | None = None,
        enabled_leagues: Optional[Iterable[League]] = None,
    ) -> None:
        self._store = store
        self.selected_sports: set[Sport] = set(ALL_SPORTS)
        self.selected_leagues: set[League] = set(ALL_LEAGUES)
        self.show_live_only = False
        self.search_text = ""

        if enabled_leagues is None and store is not None:
            enabled_leagues = store.load_enabled_leagues()
        if enabled_leagues is not None:
            self.selected_leagues = set(enabled_leagues)
            self._update_sport_selection()

    # ── Mutations ───────────────────────────────────────────────────────

    def toggle_sport(self, sport: Sport) -> None:
        if sport in self.selected_sports:
            self.selected_sports.discard(sport)
            self.selected_leagues.difference_update(sport.leagues)
        else:
            self.selected_sports.add(sport)
            self.selected_leagues.update(sport.leagues)
        self._save()

    def toggle_league(self, league: League) -> None:
        if league in self.selected_leagues:
            self.selected_leagues.discard(league)
        else:
            self.selected_leagues.add(league)
        self._update_sport_selection()
        self._save()

    def set_show_live_only(self, value: bool) -> None:
        self.show_live_only = value

    def set_search_text(self, text: str) -> None:
        self.search_text = text

    def _update_sport_selection(self) -> None:
        for sport in ALL_SPORTS:
            sport_leagues = set(sport.leagues)
            if sport_leagues <= self.selected_leagues:
                self.selected_sports.add(sport)
            elif sport_leagues.isdisjoint(self.selected_leagues):
                self.selected_sports.discard(sport)

    def _save(self) -> None:
        if self._store is None:
            return
        try:
            self._store.save_enabled_leagues(self.selected_leagues)
        except OSError as exc:
            logger.error("selection_save_failed", error=str(exc))

    @property
    def active_leagues(self) -> list[League]:
        """Enabled leagues in catalog order."""
        return [league for league in ALL_LEAGUES if league in self.selected_leagues]

    # ── Derived views ───────────────────────────────────────────────────

    def _matches_search(self, game: Game, query: str) -> bool:
        return any(
            query in value.casefold()
            for value in (
                game.home_team.display_name,
                game.away_team.display_name,
                game.home_team.abbreviation,
                game.away_team.abbreviation,
            )
        )

    def filtered(self, games: Sequence[Game]) -> list[Game]:
        """Games in enabled leagues, then live-only, then matching the search text."""
        result = [g for g in games if g.league in self.selected_leagues]
        if self.show_live_only:
            result = [g for g in result if g.is_live]
        query = self.search_text.strip().casefold()
        if query:
            result = [g for g in result if self._matches_search(g, query)]
        return result

    @staticmethod
    def live_games(games: Sequence[Game]) -> list[Game]:
        return [g for g in games if g.is_live]

    @staticmethod
    def today_games(
        games: Sequence[Game], now: datetime | None = None, tz: tzinfo | None = None
    ) -> list[Game]:
        today = _local_today(now, tz)
        return [g for g in games if g.local_start(tz).date() == today]

    @staticmethod
    def tomorrow_games(
        games: Sequence[Game], now: datetime | None = None, tz: tzinfo | None = None
    ) -> list[Game]:
        tomorrow = _local_today(now, tz) + timedelta(days=1)
        return [g for g in games if g.local_start(tz).date() == tomorrow]

    @staticmethod
    def upcoming_games(games: Sequence[Game]) -> list[Game]:
        return [g for g in games if g.is_upcoming]

    @staticmethod
    def completed_games(games: Sequence[Game]) -> list[Game]:
        return [g for g in games if g.is_completed]

    def games_by_league(self, games: Sequence[Game]) -> dict[League, list[Game]]:
        """Filtered games grouped by league, keys in catalog order."""
        grouped: dict[League, list[Game]] = {}
        filtered = self.filtered(games)
        for league in ALL_LEAGUES:
            bucket = [g for g in filtered if g.league is league]
            if bucket:
                grouped[league] = bucket
        return grouped

    def games_by_sport(self, games: Sequence[Game]) -> dict[Sport, list[Game]]:
        """Filtered games grouped by sport, keys in catalog order."""
        grouped: dict[Sport, list[Game]] = {}
        filtered = self.filtered(games)
        for sport in ALL_SPORTS:
            bucket = [g for g in filtered if g.sport is sport]
            if bucket:
                grouped[sport] = bucket
        return grouped
