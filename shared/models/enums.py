"""Domain enumerations for the Sports Scores platform."""
from __future__ import annotations

from enum import Enum


class GameStatus(str, Enum):
    """Closed classification of a game's state. Unrecognized raw values decode to UNKNOWN."""

    SCHEDULED = "STATUS_SCHEDULED"
    IN_PROGRESS = "STATUS_IN_PROGRESS"
    HALFTIME = "STATUS_HALFTIME"
    FINAL = "STATUS_FINAL"
    POSTPONED = "STATUS_POSTPONED"
    CANCELED = "STATUS_CANCELED"
    DELAYED = "STATUS_DELAYED"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "GameStatus":
        return cls.UNKNOWN

    @property
    def display_name(self) -> str:
        return _STATUS_DISPLAY_NAMES[self]

    @property
    def is_active(self) -> bool:
        return self in (GameStatus.IN_PROGRESS, GameStatus.HALFTIME, GameStatus.DELAYED)


_STATUS_DISPLAY_NAMES: dict[GameStatus, str] = {
    GameStatus.SCHEDULED: "Scheduled",
    GameStatus.IN_PROGRESS: "Live",
    GameStatus.HALFTIME: "Halftime",
    GameStatus.FINAL: "Final",
    GameStatus.POSTPONED: "Postponed",
    GameStatus.CANCELED: "Canceled",
    GameStatus.DELAYED: "Delayed",
    GameStatus.UNKNOWN: "Unknown",
}
