"""
Pydantic v2 domain models shared across the Sports Scores layers.
These are the normalized internal representations, NOT the upstream feed schema.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, field_validator

from shared.models.catalog import League, Sport
from shared.models.enums import GameStatus

FALLBACK_TEAM_COLOR = "666666"

# Relative luminance below which a team color is unreadable on a dark background
_DARK_LUMINANCE_THRESHOLD = 0.25


# ── Base ────────────────────────────────────────────────────────────────
class DomainModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, frozen=True)


def _is_color_too_dark(hex_color: str) -> bool:
    sanitized = hex_color.strip().replace("#", "")
    if len(sanitized) != 6:
        return False
    try:
        value = int(sanitized, 16)
    except ValueError:
        return False
    r = ((value >> 16) & 0xFF) / 255.0
    g = ((value >> 8) & 0xFF) / 255.0
    b = (value & 0xFF) / 255.0
    luminance = 0.299 * r + 0.587 * g + 0.114 * b
    return luminance < _DARK_LUMINANCE_THRESHOLD


# ── Team ────────────────────────────────────────────────────────────────
class Team(DomainModel):
    id: str
    name: str
    abbreviation: str
    display_name: str
    logo_url: Optional[AnyUrl] = None
    color: Optional[str] = None
    alternate_color: Optional[str] = None
    record: Optional[str] = None
    rank: Optional[int] = Field(default=None, ge=1, le=98)

    @property
    def primary_color(self) -> str:
        return self.color or FALLBACK_TEAM_COLOR

    @property
    def display_color(self) -> str:
        """Primary color, or the alternate one when the primary is too dark to read."""
        primary = self.primary_color.lower()
        if _is_color_too_dark(primary):
            return self.alternate_color or FALLBACK_TEAM_COLOR
        return primary

    @property
    def is_ranked(self) -> bool:
        return self.rank is not None


# ── Game ────────────────────────────────────────────────────────────────
class Game(DomainModel):
    id: str
    league: League
    home_team: Team
    away_team: Team
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    status: GameStatus = GameStatus.UNKNOWN
    start_time: datetime
    venue: Optional[str] = None
    broadcast: Optional[str] = None
    status_detail: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def start_time_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def sport(self) -> Sport:
        return self.league.sport

    @property
    def is_live(self) -> bool:
        return self.status.is_active

    @property
    def is_upcoming(self) -> bool:
        return self.status == GameStatus.SCHEDULED

    @property
    def is_completed(self) -> bool:
        return self.status == GameStatus.FINAL

    def local_start(self, tz: tzinfo | None = None) -> datetime:
        """Start time converted to ``tz`` (the system local zone when omitted)."""
        return self.start_time.astimezone(tz)

    def display_time(self, tz: tzinfo | None = None) -> str:
        if self.is_live:
            return self.status_detail or "LIVE"
        if self.is_completed:
            return "Final"
        return self.local_start(tz).strftime("%I:%M %p").lstrip("0")

    def display_date(self, now: datetime | None = None, tz: tzinfo | None = None) -> str:
        local = self.local_start(tz)
        today = (now or datetime.now(timezone.utc)).astimezone(tz).date()
        if local.date() == today:
            return "Today"
        if local.date() == today + timedelta(days=1):
            return "Tomorrow"
        return f"{local:%a, %b} {local.day}"


# ── Per-league fetch outcome ────────────────────────────────────────────
class LeagueFetchStatus(DomainModel):
    """Outcome of one league's branch in the last aggregation."""
    league: League
    success: bool
    game_count: int = 0
    latency_ms: float = 0.0
    error: Optional[str] = None
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
