"""
ESPN scoreboard feed connector.
Fetches a league's scoreboard from ESPN's public site API and normalizes it to
canonical domain models.
"""
from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from shared.config import Settings, get_settings
from shared.errors import FeedDecodeError, InvalidURLError
from shared.models.catalog import League
from shared.models.domain import Game
from shared.utils.http_client import FeedHTTPClient
from shared.utils.logging import get_logger

from ingest.normalization.normalizer import normalize_scoreboard
from ingest.providers.base import BaseFeedProvider
from ingest.providers.espn_schema import ESPNScoreboardResponse

logger = get_logger(__name__)


class ESPNFeedProvider(BaseFeedProvider):
    """ESPN scoreboard feed connector."""

    SCOREBOARD_PATH = "{base}/{sport}/{league}/scoreboard"

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: FeedHTTPClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings or get_settings()
        http_client = http_client or FeedHTTPClient(
            base_url=settings.feed_base_url_str,
            timeout_s=settings.feed_request_timeout_s,
            connect_timeout_s=settings.feed_connect_timeout_s,
            connectivity_retry_s=settings.feed_connectivity_retry_s,
            transport=transport,
            settings=settings,
        )
        super().__init__(name="espn", http_client=http_client)

    def build_url(self, league: League) -> str:
        """Build the scoreboard URL from the league's routing segments."""
        url = self.SCOREBOARD_PATH.format(
            base=self._http.base_url,
            sport=league.feed_sport,
            league=league.feed_league,
        )
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as exc:
            raise InvalidURLError(league, url) from exc
        if not parsed.scheme or not parsed.host:
            raise InvalidURLError(league, url)
        return url

    async def fetch(self, league: League) -> ESPNScoreboardResponse:
        """
        Fetch and decode one league's scoreboard.

        Raises:
            FeedError: Any of the taxonomy in shared.errors.
        """
        url = self.build_url(league)
        resp = await self._http.get(url, league)
        try:
            body = resp.json()
        except ValueError as exc:
            raise FeedDecodeError(league, f"body is not JSON ({exc})") from exc
        try:
            return ESPNScoreboardResponse.model_validate(body)
        except ValidationError as exc:
            logger.warning("feed_schema_mismatch", league=league.value, errors=exc.error_count())
            raise FeedDecodeError(league, f"unexpected scoreboard shape ({exc.error_count()} errors)") from exc

    def normalize(self, payload: Any, league: League) -> list[Game]:
        return normalize_scoreboard(payload, league)
