"""
Static sport and league catalog.

Every league carries the two path segments the scoreboard feed is routed by
(``{base}/{feed_sport}/{feed_league}/scoreboard``). The set is closed: adding a
league means adding an enum member and a row in ``_LEAGUES``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Sport(str, Enum):
    FOOTBALL = "football"
    BASKETBALL = "basketball"
    BASEBALL = "baseball"
    HOCKEY = "hockey"
    SOCCER = "soccer"
    RACING = "racing"
    TENNIS = "tennis"
    GOLF = "golf"

    @property
    def display_name(self) -> str:
        return _SPORTS[self].display_name

    @property
    def icon(self) -> str:
        return _SPORTS[self].icon

    @property
    def leagues(self) -> tuple["League", ...]:
        return tuple(league for league in League if _LEAGUES[league].sport is self)


class League(str, Enum):
    """League identifier. The value is the string persisted in the user's preferences."""

    NFL = "nfl"
    COLLEGE_FOOTBALL = "college-football"
    NBA = "nba"
    WNBA = "wnba"
    COLLEGE_BASKETBALL = "mens-college-basketball"
    MLB = "mlb"
    NHL = "nhl"
    PREMIER_LEAGUE = "eng.1"
    LA_LIGA = "esp.1"
    MLS = "usa.1"
    CHAMPIONS_LEAGUE = "uefa.champions"
    F1 = "f1"
    ATP = "atp"
    WTA = "wta"
    PGA = "pga"

    @property
    def sport(self) -> Sport:
        return _LEAGUES[self].sport

    @property
    def display_name(self) -> str:
        return _LEAGUES[self].display_name

    @property
    def feed_sport(self) -> str:
        return _LEAGUES[self].feed_sport

    @property
    def feed_league(self) -> str:
        return _LEAGUES[self].feed_league

    @classmethod
    def from_id(cls, raw: str) -> "League | None":
        """Look up a league by its persisted identifier; None when unknown."""
        try:
            return cls(raw)
        except ValueError:
            return None


@dataclass(frozen=True)
class SportInfo:
    display_name: str
    icon: str


@dataclass(frozen=True)
class LeagueInfo:
    sport: Sport
    display_name: str
    feed_sport: str
    feed_league: str


_SPORTS: dict[Sport, SportInfo] = {
    Sport.FOOTBALL: SportInfo("Football", "football.fill"),
    Sport.BASKETBALL: SportInfo("Basketball", "basketball.fill"),
    Sport.BASEBALL: SportInfo("Baseball", "baseball.fill"),
    Sport.HOCKEY: SportInfo("Hockey", "hockey.puck.fill"),
    Sport.SOCCER: SportInfo("Soccer", "soccerball"),
    Sport.RACING: SportInfo("Racing", "flag.checkered"),
    Sport.TENNIS: SportInfo("Tennis", "tennis.racket"),
    Sport.GOLF: SportInfo("Golf", "figure.golf"),
}

_LEAGUES: dict[League, LeagueInfo] = {
    # Football
    League.NFL: LeagueInfo(Sport.FOOTBALL, "NFL", "football", "nfl"),
    League.COLLEGE_FOOTBALL: LeagueInfo(Sport.FOOTBALL, "College Football", "football", "college-football"),
    # Basketball
    League.NBA: LeagueInfo(Sport.BASKETBALL, "NBA", "basketball", "nba"),
    League.WNBA: LeagueInfo(Sport.BASKETBALL, "WNBA", "basketball", "wnba"),
    League.COLLEGE_BASKETBALL: LeagueInfo(
        Sport.BASKETBALL, "College Basketball", "basketball", "mens-college-basketball"
    ),
    # Baseball
    League.MLB: LeagueInfo(Sport.BASEBALL, "MLB", "baseball", "mlb"),
    # Hockey
    League.NHL: LeagueInfo(Sport.HOCKEY, "NHL", "hockey", "nhl"),
    # Soccer
    League.PREMIER_LEAGUE: LeagueInfo(Sport.SOCCER, "Premier League", "soccer", "eng.1"),
    League.LA_LIGA: LeagueInfo(Sport.SOCCER, "La Liga", "soccer", "esp.1"),
    League.MLS: LeagueInfo(Sport.SOCCER, "MLS", "soccer", "usa.1"),
    League.CHAMPIONS_LEAGUE: LeagueInfo(Sport.SOCCER, "Champions League", "soccer", "uefa.champions"),
    # Racing
    League.F1: LeagueInfo(Sport.RACING, "Formula 1", "racing", "f1"),
    # Tennis
    League.ATP: LeagueInfo(Sport.TENNIS, "ATP Tour", "tennis", "atp"),
    League.WTA: LeagueInfo(Sport.TENNIS, "WTA Tour", "tennis", "wta"),
    # Golf
    League.PGA: LeagueInfo(Sport.GOLF, "PGA Tour", "golf", "pga"),
}

ALL_SPORTS: tuple[Sport, ...] = tuple(Sport)
ALL_LEAGUES: tuple[League, ...] = tuple(League)

# Position of each league in catalog order, used as a stable tie-breaker
LEAGUE_ORDER: dict[League, int] = {league: idx for idx, league in enumerate(League)}
