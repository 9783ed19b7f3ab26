"""
Error taxonomy for scoreboard feeds and aggregation.

Feed errors are raised by the feed client and always carry the league they
belong to. The aggregator contains them per league; only AggregationError
reaches the refresh controller.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from shared.models.catalog import League


class FeedError(Exception):
    """Base class for failures fetching one league's scoreboard."""

    def __init__(self, league: "League", message: str) -> None:
        self.league = league
        super().__init__(f"{league.display_name}: {message}")


class InvalidURLError(FeedError):
    """The scoreboard URL built from the catalog is malformed."""

    def __init__(self, league: "League", url: str) -> None:
        self.url = url
        super().__init__(league, f"Invalid URL {url!r}")


class InvalidResponseError(FeedError):
    """The transport succeeded but the response is not well-formed HTTP."""

    def __init__(self, league: "League", detail: str = "") -> None:
        message = "Invalid response from server"
        super().__init__(league, f"{message} ({detail})" if detail else message)


class FeedHTTPError(FeedError):
    """The feed answered with a status other than 200."""

    def __init__(self, league: "League", status_code: int) -> None:
        self.status_code = status_code
        super().__init__(league, f"HTTP error: {status_code}")


class FeedDecodeError(FeedError):
    """The body is not JSON or does not match the scoreboard schema."""

    def __init__(self, league: "League", detail: str) -> None:
        self.detail = detail
        super().__init__(league, f"Failed to decode response: {detail}")


class FeedTransportError(FeedError):
    """The request timed out or connectivity did not return within the timeout."""

    def __init__(self, league: "League", detail: str) -> None:
        self.detail = detail
        super().__init__(league, f"Network error: {detail}")


class AggregationError(Exception):
    """Every requested league failed, so there is nothing to merge."""

    def __init__(self, failures: Mapping["League", str]) -> None:
        self.failures = dict(failures)
        leagues = ", ".join(league.display_name for league in self.failures)
        super().__init__(f"All {len(self.failures)} league feeds failed: {leagues}")
