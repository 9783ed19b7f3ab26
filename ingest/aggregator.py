"""
Scoreboard aggregator.

Fans out one feed request per league, waits for all of them, and merges the
results into a single list: live games first, then by start time. A league
whose fetch fails contributes nothing instead of failing the others.
"""
from __future__ import annotations

import asyncio
import time
from datetime import datetime
from typing import Iterable, Sequence

from shared.errors import AggregationError
from shared.models.catalog import ALL_LEAGUES, LEAGUE_ORDER, League
from shared.models.domain import Game, LeagueFetchStatus
from shared.utils.logging import get_logger
from shared.utils.metrics import AGGREGATION_DURATION, LEAGUE_FETCH_FAILURES, atrack_latency

from ingest.providers.base import BaseFeedProvider

logger = get_logger(__name__)


def _merge_key(game: Game) -> tuple[bool, datetime, int, str]:
    return (not game.is_live, game.start_time, LEAGUE_ORDER[game.league], game.id)


def merge_games(batches: Iterable[Sequence[Game]]) -> list[Game]:
    """
    Concatenate per-league results and apply the total order.

    Live games sort before every non-live game, then start time ascending.
    League catalog order and game id break ties so the result does not depend
    on which league finished first.
    """
    merged: list[Game] = []
    for batch in batches:
        merged.extend(batch)
    merged.sort(key=_merge_key)
    return merged


class ScoreAggregator:
    """Concurrent fan-out/fan-in over a feed provider."""

    def __init__(self, provider: BaseFeedProvider) -> None:
        self._provider = provider
        self._last_statuses: dict[League, LeagueFetchStatus] = {}

    @property
    def last_statuses(self) -> dict[League, LeagueFetchStatus]:
        """Per-league outcome of the most recent fetch_merged() call."""
        return dict(self._last_statuses)

    async def _fetch_league(self, league: League) -> tuple[list[Game], LeagueFetchStatus]:
        start = time.perf_counter()
        try:
            games = await self._provider.fetch_games(league)
        except Exception as exc:
            latency_ms = (time.perf_counter() - start) * 1000
            LEAGUE_FETCH_FAILURES.labels(league=league.value).inc()
            logger.warning(
                "league_fetch_failed",
                league=league.value,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return [], LeagueFetchStatus(
                league=league,
                success=False,
                latency_ms=round(latency_ms, 2),
                error=str(exc),
            )

        latency_ms = (time.perf_counter() - start) * 1000
        return games, LeagueFetchStatus(
            league=league,
            success=True,
            game_count=len(games),
            latency_ms=round(latency_ms, 2),
        )

    async def fetch_merged(self, leagues: Iterable[League]) -> list[Game]:
        """
        Fetch every requested league concurrently and merge the results.

        Args:
            leagues: Leagues to fetch; duplicates are ignored.

        Returns:
            Merged, sorted games. Empty when no leagues were requested.

        Raises:
            AggregationError: Every requested league failed.
        """
        requested = sorted(set(leagues), key=LEAGUE_ORDER.__getitem__)
        if not requested:
            self._last_statuses = {}
            return []

        async with atrack_latency(AGGREGATION_DURATION):
            outcomes = await asyncio.gather(*(self._fetch_league(league) for league in requested))

        statuses = {status.league: status for _, status in outcomes}
        self._last_statuses = statuses

        failures = {league: status.error or "" for league, status in statuses.items() if not status.success}
        if len(failures) == len(requested):
            raise AggregationError(failures)

        games = merge_games(batch for batch, _ in outcomes)
        logger.info(
            "aggregation_complete",
            leagues=len(requested),
            failed=len(failures),
            games=len(games),
            live=sum(1 for g in games if g.is_live),
        )
        return games

    async def fetch_all(self) -> list[Game]:
        """Fetch every league in the catalog."""
        return await self.fetch_merged(ALL_LEAGUES)
