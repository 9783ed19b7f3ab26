"""
Abstract base class for scoreboard feed providers.
Defines the contract that every feed connector must implement.
"""
from __future__ import annotations

import abc
from typing import Any

from shared.models.catalog import League
from shared.models.domain import Game
from shared.utils.http_client import FeedHTTPClient
from shared.utils.logging import get_logger

logger = get_logger(__name__)


class BaseFeedProvider(abc.ABC):
    """
    Abstract base class for scoreboard feeds.

    Each provider knows how to build a league's URL, fetch its raw payload and
    normalize it. The base class handles the HTTP client lifecycle.
    """

    def __init__(self, name: str, http_client: FeedHTTPClient) -> None:
        self._name = name
        self._http = http_client

    async def start(self) -> None:
        """Initialize the provider HTTP client."""
        await self._http.start()

    async def close(self) -> None:
        """Shutdown the provider HTTP client."""
        await self._http.close()

    async def __aenter__(self) -> "BaseFeedProvider":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def fetch_games(self, league: League) -> list[Game]:
        """Fetch one league's feed and normalize it. Raises FeedError on failure."""
        payload = await self.fetch(league)
        games = self.normalize(payload, league)
        logger.debug("league_normalized", provider=self._name, league=league.value, games=len(games))
        return games

    # ── Abstract methods (each provider implements these) ───────────────
    @abc.abstractmethod
    def build_url(self, league: League) -> str:
        """Absolute scoreboard URL for a league."""
        ...

    @abc.abstractmethod
    async def fetch(self, league: League) -> Any:
        """Fetch and decode the raw payload. Raises FeedError on failure."""
        ...

    @abc.abstractmethod
    def normalize(self, payload: Any, league: League) -> list[Game]:
        """Convert a decoded payload into games. Must not raise."""
        ...
