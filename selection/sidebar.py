"""Sidebar filters applied on top of the user's selection."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
from typing import Optional, Sequence

from shared.models.catalog import Sport
from shared.models.domain import Game

from selection.state import SelectionState


class SidebarKind(str, Enum):
    LIVE = "live"
    TODAY = "today"
    TOMORROW = "tomorrow"
    ALL = "all"
    SPORT = "sport"


@dataclass(frozen=True)
class SidebarFilter:
    kind: SidebarKind
    sport: Optional[Sport] = None

    def __post_init__(self) -> None:
        if (self.kind is SidebarKind.SPORT) != (self.sport is not None):
            raise ValueError("a sport is required for, and only for, SidebarKind.SPORT")

    @classmethod
    def for_sport(cls, sport: Sport) -> "SidebarFilter":
        return cls(SidebarKind.SPORT, sport)

    @property
    def display_name(self) -> str:
        if self.sport is not None:
            return self.sport.display_name
        return {
            SidebarKind.LIVE: "Live",
            SidebarKind.TODAY: "Today",
            SidebarKind.TOMORROW: "Tomorrow",
            SidebarKind.ALL: "All Sports",
        }[self.kind]

    @property
    def icon(self) -> str:
        if self.sport is not None:
            return self.sport.icon
        return {
            SidebarKind.LIVE: "livephoto",
            SidebarKind.TODAY: "calendar",
            SidebarKind.TOMORROW: "calendar.badge.clock",
            SidebarKind.ALL: "sportscourt.fill",
        }[self.kind]

    @property
    def empty_title(self) -> str:
        return {
            SidebarKind.LIVE: "No Live Games",
            SidebarKind.TODAY: "No Games Today",
            SidebarKind.TOMORROW: "No Games Tomorrow",
        }.get(self.kind, "No Games")

    @property
    def empty_message(self) -> str:
        return {
            SidebarKind.LIVE: "There are no games in progress right now",
            SidebarKind.TODAY: "No games scheduled for today",
            SidebarKind.TOMORROW: "No games scheduled for tomorrow",
        }.get(self.kind, "No games scheduled for the selected filters")


LIVE = SidebarFilter(SidebarKind.LIVE)
TODAY = SidebarFilter(SidebarKind.TODAY)
TOMORROW = SidebarFilter(SidebarKind.TOMORROW)
ALL = SidebarFilter(SidebarKind.ALL)


def apply_sidebar_filter(
    selection: SelectionState,
    games: Sequence[Game],
    sidebar: SidebarFilter,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[Game]:
    """The selection's filtered games narrowed to one sidebar entry."""
    filtered = selection.filtered(games)
    if sidebar.kind is SidebarKind.LIVE:
        return selection.live_games(filtered)
    if sidebar.kind is SidebarKind.TODAY:
        return selection.today_games(filtered, now=now, tz=tz)
    if sidebar.kind is SidebarKind.TOMORROW:
        return selection.tomorrow_games(filtered, now=now, tz=tz)
    if sidebar.kind is SidebarKind.SPORT:
        return [g for g in filtered if g.sport is sidebar.sport]
    return filtered
