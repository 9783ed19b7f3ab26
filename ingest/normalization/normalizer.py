"""
Normalization layer for scoreboard feeds.
Turns an ESPN scoreboard payload into canonical Game/Team domain models.

normalize_scoreboard() never raises: an event that cannot be turned into a
Game is skipped and counted, so one bad entry cannot blank out a league.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Union

from pydantic import AnyUrl, TypeAdapter, ValidationError

from shared.models.catalog import League
from shared.models.domain import Game, Team
from shared.models.enums import GameStatus
from shared.utils.logging import get_logger
from shared.utils.metrics import NORMALIZED_GAMES, SKIPPED_EVENTS

from ingest.providers.espn_schema import (
    ESPNCompetitor,
    ESPNCuratedRank,
    ESPNEvent,
    ESPNScoreboardResponse,
    ESPNStatusType,
)

logger = get_logger(__name__)

# ESPN reports unranked teams with this value (or higher)
UNRANKED_SENTINEL = 99

# Tried in order; the first two are ESPN's usual shapes, the last two cover RFC 3339
_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%dT%H:%MZ",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
)

_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)

ScoreboardPayload = Union[ESPNScoreboardResponse, dict[str, Any]]


def _parse_rank(curated_rank: Optional[ESPNCuratedRank]) -> Optional[int]:
    """Curated rank, with ESPN's unranked sentinel mapped to None."""
    if curated_rank is None or curated_rank.current is None:
        return None
    rank = curated_rank.current
    if rank >= UNRANKED_SENTINEL or rank < 1:
        return None
    return rank


def _parse_game_status(status_type: ESPNStatusType) -> GameStatus:
    """Map ESPN state + status name to GameStatus."""
    name = status_type.name.lower()
    state = status_type.state

    if state == "pre":
        return GameStatus.SCHEDULED
    if state == "in":
        if "halftime" in name:
            return GameStatus.HALFTIME
        return GameStatus.IN_PROGRESS
    if state == "post":
        return GameStatus.FINAL

    if "postponed" in name:
        return GameStatus.POSTPONED
    if "canceled" in name:
        return GameStatus.CANCELED
    if "delayed" in name:
        return GameStatus.DELAYED
    return GameStatus.UNKNOWN


def _parse_start_time(raw: str) -> Optional[datetime]:
    """Parse an ESPN date string to an aware UTC datetime; None if no format matches."""
    value = raw.strip()
    for fmt in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    return None


def _parse_score(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    value = raw.strip()
    digits = value[1:] if value[:1] in ("+", "-") else value
    # int() would also take "1_0" and non-ASCII digits
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(value)


def _parse_logo_url(raw: Optional[str]) -> Optional[AnyUrl]:
    if not raw:
        return None
    try:
        return _URL_ADAPTER.validate_python(raw)
    except ValidationError:
        logger.debug("team_logo_unparseable", logo=raw)
        return None


def _build_team(competitor: ESPNCompetitor) -> Team:
    team = competitor.team
    record = None
    if competitor.records:
        record = competitor.records[0].summary
    return Team(
        id=team.id,
        name=team.name,
        abbreviation=team.abbreviation,
        display_name=team.display_name,
        logo_url=_parse_logo_url(team.logo),
        color=team.color,
        alternate_color=team.alternate_color,
        record=record,
        rank=_parse_rank(competitor.curated_rank),
    )


def _skip(league: League, reason: str, **context: Any) -> None:
    SKIPPED_EVENTS.labels(league=league.value, reason=reason).inc()
    logger.debug("event_skipped", league=league.value, reason=reason, **context)


def normalize_event(event: ESPNEvent, league: League) -> Optional[Game]:
    """
    Build a Game from one validated event.

    Returns None when the event has no competition, or lacks a home or an
    away competitor.
    """
    if not event.competitions:
        _skip(league, "no_competition", event_id=event.id)
        return None
    competition = event.competitions[0]

    home = next((c for c in competition.competitors if c.home_away == "home"), None)
    away = next((c for c in competition.competitors if c.home_away == "away"), None)
    if home is None or away is None:
        _skip(league, "missing_competitor", event_id=event.id)
        return None

    start_time = _parse_start_time(event.date)
    if start_time is None:
        # TODO: surface unparseable dates in LeagueFetchStatus instead of only logging them
        logger.warning("event_date_unparseable", league=league.value, event_id=event.id, date=event.date)
        start_time = datetime.now(timezone.utc)

    broadcast = None
    if competition.broadcasts:
        names = competition.broadcasts[0].names
        if names:
            broadcast = names[0]

    status_type = event.status.type
    return Game(
        id=event.id,
        league=league,
        home_team=_build_team(home),
        away_team=_build_team(away),
        home_score=_parse_score(home.score),
        away_score=_parse_score(away.score),
        status=_parse_game_status(status_type),
        start_time=start_time,
        venue=competition.venue.full_name if competition.venue else None,
        broadcast=broadcast,
        status_detail=status_type.short_detail,
    )


def normalize_scoreboard(payload: ScoreboardPayload, league: League) -> list[Game]:
    """
    Normalize a whole scoreboard payload for one league.

    Args:
        payload: Decoded scoreboard body, as the schema model or a raw dict.
        league: League the payload was fetched for.

    Returns:
        Games in feed order; malformed events are left out.
    """
    if isinstance(payload, ESPNScoreboardResponse):
        raw_events = payload.events
    else:
        raw_events = payload.get("events") or []

    games: list[Game] = []
    for raw in raw_events:
        try:
            event = ESPNEvent.model_validate(raw)
        except ValidationError as exc:
            event_id = raw.get("id") if isinstance(raw, dict) else None
            SKIPPED_EVENTS.labels(league=league.value, reason="invalid_event").inc()
            logger.warning(
                "event_invalid",
                league=league.value,
                event_id=event_id,
                errors=exc.error_count(),
            )
            continue

        try:
            game = normalize_event(event, league)
        except ValidationError as exc:
            SKIPPED_EVENTS.labels(league=league.value, reason="invalid_game").inc()
            logger.warning("game_invalid", league=league.value, event_id=event.id, error=str(exc))
            continue
        if game is not None:
            games.append(game)

    NORMALIZED_GAMES.labels(league=league.value).inc(len(games))
    return games
