"""
Unit tests for selection/filter state: sport/league co-dependence,
persistence, filtering, derived views and sidebar filters.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from selection.sidebar import ALL, LIVE, TODAY, TOMORROW, SidebarFilter, SidebarKind, apply_sidebar_filter
from selection.state import SelectionState
from shared.models.catalog import ALL_LEAGUES, ALL_SPORTS, League, Sport
from shared.models.enums import GameStatus
from shared.utils.preferences import PreferencesStore

NOW = datetime(2025, 12, 5, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store(tmp_path) -> PreferencesStore:
    return PreferencesStore(tmp_path / "prefs.json")


@pytest.fixture
def games(make_game, make_team) -> list:
    return [
        make_game("nfl-live", league=League.NFL, status=GameStatus.IN_PROGRESS, start_time=NOW),
        make_game(
            "nba-tomorrow", league=League.NBA, status=GameStatus.SCHEDULED,
            start_time=NOW + timedelta(days=1),
            home=make_team("BOS", "Boston Celtics"), away=make_team("LAL", "Los Angeles Lakers"),
        ),
        make_game(
            "epl-final", league=League.PREMIER_LEAGUE, status=GameStatus.FINAL,
            start_time=NOW - timedelta(hours=3),
            home=make_team("ARS", "Arsenal"), away=make_team("CHE", "Chelsea"),
        ),
        make_game(
            "mls-today", league=League.MLS, status=GameStatus.SCHEDULED,
            start_time=NOW + timedelta(hours=6),
            home=make_team("LA", "LA Galaxy"), away=make_team("SEA", "Seattle Sounders FC"),
        ),
    ]


# ── Toggling ────────────────────────────────────────────────────────────

class TestToggles:

    def test_defaults_all_enabled(self) -> None:
        state = SelectionState()
        assert state.selected_sports == set(ALL_SPORTS)
        assert state.selected_leagues == set(ALL_LEAGUES)

    def test_toggle_sport_off_and_on(self) -> None:
        state = SelectionState()
        state.toggle_sport(Sport.SOCCER)
        assert Sport.SOCCER not in state.selected_sports
        assert state.selected_leagues.isdisjoint(Sport.SOCCER.leagues)

        state.toggle_sport(Sport.SOCCER)
        assert Sport.SOCCER in state.selected_sports
        assert set(Sport.SOCCER.leagues) <= state.selected_leagues

    def test_all_leagues_off_disables_sport(self) -> None:
        state = SelectionState()
        for league in Sport.BASKETBALL.leagues:
            state.toggle_league(league)
        assert Sport.BASKETBALL not in state.selected_sports

    def test_partial_league_leaves_sport_unchanged(self) -> None:
        state = SelectionState()
        state.toggle_league(League.WNBA)
        assert Sport.BASKETBALL in state.selected_sports

    def test_one_league_does_not_reenable_sport(self) -> None:
        state = SelectionState()
        state.toggle_sport(Sport.BASKETBALL)
        state.toggle_league(League.NBA)
        assert League.NBA in state.selected_leagues
        assert Sport.BASKETBALL not in state.selected_sports

    def test_full_coverage_reenables_sport(self) -> None:
        state = SelectionState()
        state.toggle_sport(Sport.FOOTBALL)
        state.toggle_league(League.NFL)
        state.toggle_league(League.COLLEGE_FOOTBALL)
        assert Sport.FOOTBALL in state.selected_sports

    def test_single_league_sport_follows_its_league(self) -> None:
        state = SelectionState()
        state.toggle_league(League.NHL)
        assert Sport.HOCKEY not in state.selected_sports
        state.toggle_league(League.NHL)
        assert Sport.HOCKEY in state.selected_sports

    def test_active_leagues_in_catalog_order(self) -> None:
        state = SelectionState(enabled_leagues=[League.PGA, League.NFL, League.NHL])
        assert state.active_leagues == [League.NFL, League.NHL, League.PGA]


# ── Persistence ─────────────────────────────────────────────────────────

class TestPersistence:

    def test_toggle_persists_selection(self, store: PreferencesStore) -> None:
        state = SelectionState(store)
        state.toggle_sport(Sport.GOLF)

        reloaded = PreferencesStore(store.path).load_enabled_leagues()
        assert reloaded == set(ALL_LEAGUES) - {League.PGA}

    def test_loaded_selection_recomputes_sports(self, store: PreferencesStore) -> None:
        store.save_enabled_leagues([League.NFL, League.COLLEGE_FOOTBALL, League.NBA])
        state = SelectionState(store)
        assert state.selected_leagues == {League.NFL, League.COLLEGE_FOOTBALL, League.NBA}
        assert Sport.FOOTBALL in state.selected_sports
        assert Sport.BASKETBALL in state.selected_sports
        assert Sport.SOCCER not in state.selected_sports

    def test_filter_setters_do_not_persist(self, store: PreferencesStore) -> None:
        state = SelectionState(store)
        state.set_search_text("celtics")
        state.set_show_live_only(True)
        assert not store.path.exists()


# ── Filtering ───────────────────────────────────────────────────────────

class TestFiltered:

    def test_restricts_to_enabled_leagues(self, games) -> None:
        state = SelectionState()
        state.toggle_sport(Sport.SOCCER)
        assert [g.id for g in state.filtered(games)] == ["nfl-live", "nba-tomorrow"]

    def test_live_only(self, games) -> None:
        state = SelectionState()
        state.set_show_live_only(True)
        assert [g.id for g in state.filtered(games)] == ["nfl-live"]

    @pytest.mark.parametrize("query", ["celtics", "CELTICS", "lal", "Angeles"])
    def test_search_matches_name_or_abbreviation(self, games, query: str) -> None:
        state = SelectionState()
        state.set_search_text(query)
        assert [g.id for g in state.filtered(games)] == ["nba-tomorrow"]

    def test_blank_search_matches_all(self, games) -> None:
        state = SelectionState()
        state.set_search_text("   ")
        assert len(state.filtered(games)) == len(games)

    def test_filters_compose(self, games) -> None:
        state = SelectionState()
        state.set_show_live_only(True)
        state.set_search_text("celtics")
        assert state.filtered(games) == []

    def test_idempotent(self, games) -> None:
        state = SelectionState()
        state.set_search_text("a")
        assert state.filtered(games) == state.filtered(games)

    def test_does_not_mutate_snapshot(self, games) -> None:
        snapshot = list(games)
        state = SelectionState()
        state.toggle_sport(Sport.FOOTBALL)
        state.filtered(games)
        assert games == snapshot


# ── Derived views ───────────────────────────────────────────────────────

class TestDerivedViews:

    def test_status_views(self, games) -> None:
        assert [g.id for g in SelectionState.live_games(games)] == ["nfl-live"]
        assert [g.id for g in SelectionState.upcoming_games(games)] == ["nba-tomorrow", "mls-today"]
        assert [g.id for g in SelectionState.completed_games(games)] == ["epl-final"]

    def test_today_and_tomorrow_in_utc(self, games) -> None:
        today = SelectionState.today_games(games, now=NOW, tz=timezone.utc)
        tomorrow = SelectionState.tomorrow_games(games, now=NOW, tz=timezone.utc)
        assert [g.id for g in today] == ["nfl-live", "epl-final", "mls-today"]
        assert [g.id for g in tomorrow] == ["nba-tomorrow"]

    def test_today_uses_local_calendar_day(self, games) -> None:
        # 18:00 UTC on Dec 5 is already Dec 6 in UTC+8
        tz = timezone(timedelta(hours=8))
        tomorrow = SelectionState.tomorrow_games(games, now=NOW, tz=tz)
        assert "mls-today" in [g.id for g in tomorrow]

    def test_group_by_league(self, games) -> None:
        grouped = SelectionState().games_by_league(games)
        assert list(grouped) == [League.NFL, League.NBA, League.PREMIER_LEAGUE, League.MLS]
        assert [g.id for g in grouped[League.MLS]] == ["mls-today"]

    def test_group_by_sport_uses_filtered(self, games) -> None:
        state = SelectionState()
        state.toggle_league(League.MLS)
        grouped = state.games_by_sport(games)
        assert list(grouped) == [Sport.FOOTBALL, Sport.BASKETBALL, Sport.SOCCER]
        assert [g.id for g in grouped[Sport.SOCCER]] == ["epl-final"]


# ── Sidebar ─────────────────────────────────────────────────────────────

class TestSidebar:

    def test_live(self, games) -> None:
        assert [g.id for g in apply_sidebar_filter(SelectionState(), games, LIVE)] == ["nfl-live"]

    def test_tomorrow(self, games) -> None:
        result = apply_sidebar_filter(SelectionState(), games, TOMORROW, now=NOW, tz=timezone.utc)
        assert [g.id for g in result] == ["nba-tomorrow"]

    def test_today_respects_selection(self, games) -> None:
        state = SelectionState()
        state.toggle_sport(Sport.SOCCER)
        result = apply_sidebar_filter(state, games, TODAY, now=NOW, tz=timezone.utc)
        assert [g.id for g in result] == ["nfl-live"]

    def test_sport(self, games) -> None:
        result = apply_sidebar_filter(SelectionState(), games, SidebarFilter.for_sport(Sport.SOCCER))
        assert [g.id for g in result] == ["epl-final", "mls-today"]

    def test_all(self, games) -> None:
        assert len(apply_sidebar_filter(SelectionState(), games, ALL)) == 4

    def test_labels(self) -> None:
        assert LIVE.display_name == "Live"
        assert ALL.icon == "sportscourt.fill"
        assert SidebarFilter.for_sport(Sport.HOCKEY).display_name == "Hockey"
        assert TODAY.empty_title == "No Games Today"
        assert SidebarFilter.for_sport(Sport.GOLF).empty_title == "No Games"

    def test_sport_kind_requires_sport(self) -> None:
        with pytest.raises(ValueError):
            SidebarFilter(SidebarKind.SPORT)
        with pytest.raises(ValueError):
            SidebarFilter(SidebarKind.LIVE, Sport.GOLF)
