"""
Async HTTP client wrapper for scoreboard feed requests.
Includes connectivity waiting, timeout management, error classification and metrics.
"""
from __future__ import annotations

import asyncio
import time
from typing import Any, Optional

import httpx

from shared.config import Settings, get_settings
from shared.errors import (
    FeedHTTPError,
    FeedTransportError,
    InvalidResponseError,
    InvalidURLError,
)
from shared.models.catalog import League
from shared.utils.logging import get_logger
from shared.utils.metrics import FEED_LATENCY, FEED_REQUESTS

logger = get_logger(__name__)


class FeedHTTPClient:
    """
    Async HTTP client tailored for the scoreboard feeds.

    A refused or unreachable connection is treated as "offline": the client
    pauses and tries again until the request timeout budget is spent. Every
    other failure is classified into the FeedError taxonomy immediately.
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        timeout_s: float | None = None,
        connect_timeout_s: float | None = None,
        connectivity_retry_s: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_s or settings.feed_request_timeout_s
        self._connect_timeout = min(connect_timeout_s or settings.feed_connect_timeout_s, self._timeout)
        self._connectivity_retry = connectivity_retry_s or settings.feed_connectivity_retry_s
        self._default_headers = headers or {"Accept": "application/json"}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def start(self) -> None:
        """Initialize the underlying httpx client."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            headers=self._default_headers,
            timeout=httpx.Timeout(self._timeout, connect=self._connect_timeout),
            follow_redirects=True,
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            transport=self._transport,
        )

    async def close(self) -> None:
        """Close the underlying httpx client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "FeedHTTPClient":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def get(self, url: str, league: League) -> httpx.Response:
        """
        Perform a GET request for one league's feed.

        Args:
            url: Absolute feed URL.
            league: League the request belongs to, for errors, logs and metrics.

        Returns:
            httpx.Response with status 200.

        Raises:
            InvalidURLError: The URL cannot be requested.
            InvalidResponseError: The server did not speak well-formed HTTP, or redirected in a loop.
            FeedHTTPError: The status code was not 200.
            FeedTransportError: Timeout, no connectivity within the timeout budget,
                or any other httpx failure.
        """
        if not self._client:
            raise RuntimeError("FeedHTTPClient not started. Call start() first.")

        deadline = time.monotonic() + self._timeout
        start_time = time.perf_counter()
        status = "unknown"
        try:
            while True:
                try:
                    resp = await self._client.get(url)
                    break
                except httpx.ConnectError as exc:
                    remaining = deadline - time.monotonic()
                    if remaining <= self._connectivity_retry:
                        status = "offline"
                        raise FeedTransportError(league, f"no connectivity: {exc}") from exc
                    logger.info(
                        "feed_waiting_for_connectivity",
                        league=league.value,
                        url=url,
                        retry_in_s=self._connectivity_retry,
                        error=str(exc),
                    )
                    await asyncio.sleep(self._connectivity_retry)

            status = str(resp.status_code)
            if resp.status_code != 200:
                logger.warning(
                    "feed_http_error",
                    league=league.value,
                    url=url,
                    status=resp.status_code,
                )
                raise FeedHTTPError(league, resp.status_code)

            logger.debug(
                "feed_request_success",
                league=league.value,
                url=url,
                latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            return resp

        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            status = "invalid_url"
            raise InvalidURLError(league, url) from exc

        except httpx.TimeoutException as exc:
            status = "timeout"
            logger.warning("feed_timeout", league=league.value, url=url, timeout_s=self._timeout)
            raise FeedTransportError(league, f"timed out after {self._timeout:g}s") from exc

        except (httpx.ProtocolError, httpx.DecodingError, httpx.TooManyRedirects) as exc:
            status = "invalid_response"
            raise InvalidResponseError(league, str(exc)) from exc

        except httpx.HTTPError as exc:
            status = "transport_error"
            raise FeedTransportError(league, str(exc) or type(exc).__name__) from exc

        finally:
            FEED_REQUESTS.labels(league=league.value, status=status).inc()
            FEED_LATENCY.labels(league=league.value).observe(time.perf_counter() - start_time)
