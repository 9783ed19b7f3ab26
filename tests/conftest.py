"""Shared fixtures: ESPN payload builders and Game factories."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from shared.config import Settings
from shared.models.catalog import League
from shared.models.domain import Game, Team
from shared.models.enums import GameStatus


def competitor_payload(
    home_away: str,
    team_id: str,
    abbreviation: str,
    display_name: str,
    score: Optional[str] = None,
    rank: Optional[int] = None,
    record: Optional[str] = None,
    logo: Optional[str] = None,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": team_id,
        "homeAway": home_away,
        "team": {
            "id": team_id,
            "name": display_name.split()[-1],
            "abbreviation": abbreviation,
            "displayName": display_name,
            "color": "002244",
            "alternateColor": "c60c30",
        },
    }
    if score is not None:
        data["score"] = score
    if rank is not None:
        data["curatedRank"] = {"current": rank}
    if record is not None:
        data["records"] = [{"summary": record}]
    if logo is not None:
        data["team"]["logo"] = logo
    return data


def event_payload(
    event_id: str = "401772",
    date: str = "2025-12-05T01:15Z",
    state: str = "pre",
    status_name: str = "STATUS_SCHEDULED",
    short_detail: Optional[str] = "12/4 - 8:15 PM EST",
    home: Optional[dict[str, Any]] = None,
    away: Optional[dict[str, Any]] = None,
    broadcasts: Optional[list[dict[str, Any]]] = None,
    venue: Optional[str] = "Gillette Stadium",
) -> dict[str, Any]:
    competitors = [
        c for c in (
            home if home is not None else competitor_payload("home", "17", "NE", "New England Patriots"),
            away if away is not None else competitor_payload("away", "15", "MIA", "Miami Dolphins"),
        )
        if c
    ]
    competition: dict[str, Any] = {"id": event_id, "competitors": competitors}
    if venue is not None:
        competition["venue"] = {"fullName": venue, "city": "Foxborough", "state": "MA"}
    if broadcasts is not None:
        competition["broadcasts"] = broadcasts
    return {
        "id": event_id,
        "name": "Miami Dolphins at New England Patriots",
        "date": date,
        "status": {
            "type": {
                "id": "1",
                "name": status_name,
                "state": state,
                "completed": state == "post",
                "description": "Scheduled",
                "detail": short_detail,
                "shortDetail": short_detail,
            }
        },
        "competitions": [competition],
    }


@pytest.fixture
def make_event() -> Callable[..., dict[str, Any]]:
    return event_payload


@pytest.fixture
def make_competitor() -> Callable[..., dict[str, Any]]:
    return competitor_payload


def build_team(abbreviation: str = "NE", display_name: str = "New England Patriots", **kwargs: Any) -> Team:
    return Team(
        id=kwargs.pop("id", abbreviation.lower()),
        name=kwargs.pop("name", display_name.split()[-1]),
        abbreviation=abbreviation,
        display_name=display_name,
        **kwargs,
    )


def build_game(
    game_id: str = "1",
    league: League = League.NFL,
    status: GameStatus = GameStatus.SCHEDULED,
    start_time: Optional[datetime] = None,
    home: Optional[Team] = None,
    away: Optional[Team] = None,
    **kwargs: Any,
) -> Game:
    return Game(
        id=game_id,
        league=league,
        home_team=home or build_team("NE", "New England Patriots"),
        away_team=away or build_team("MIA", "Miami Dolphins"),
        status=status,
        start_time=start_time or datetime(2025, 12, 5, 1, 15, tzinfo=timezone.utc),
        **kwargs,
    )


@pytest.fixture
def make_game() -> Callable[..., Game]:
    return build_game


@pytest.fixture
def make_team() -> Callable[..., Team]:
    return build_team


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        preferences_path=tmp_path / "preferences.json",
        feed_base_url="https://feeds.test/apis/site/v2/sports",
        feed_request_timeout_s=2.0,
        feed_connectivity_retry_s=0.01,
    )
