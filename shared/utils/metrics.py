"""
Lightweight metrics collection for Sports Scores.
Wraps prometheus_client with async-safe patterns.
"""
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from prometheus_client import Counter, Gauge, Histogram, start_http_server

from shared.config import Settings, get_settings
from shared.utils.logging import get_logger

logger = get_logger(__name__)

# ── Counters ────────────────────────────────────────────────────────────
FEED_REQUESTS = Counter(
    "ss_feed_requests_total",
    "Total scoreboard feed HTTP requests",
    ["league", "status"],
)
NORMALIZED_GAMES = Counter(
    "ss_normalized_games_total",
    "Games produced by the response normalizer",
    ["league"],
)
SKIPPED_EVENTS = Counter(
    "ss_skipped_events_total",
    "Upstream events dropped during normalization",
    ["league", "reason"],
)
LEAGUE_FETCH_FAILURES = Counter(
    "ss_league_fetch_failures_total",
    "Per-league failures contained by the aggregator",
    ["league"],
)
REFRESH_CYCLES = Counter(
    "ss_refresh_cycles_total",
    "Refresh cycles run by the refresh controller",
    ["outcome"],
)

# ── Histograms ──────────────────────────────────────────────────────────
FEED_LATENCY = Histogram(
    "ss_feed_latency_seconds",
    "Scoreboard feed request latency in seconds",
    ["league"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)
AGGREGATION_DURATION = Histogram(
    "ss_aggregation_seconds",
    "Time to fan out, normalize and merge all requested leagues",
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# ── Gauges ──────────────────────────────────────────────────────────────
SNAPSHOT_GAMES = Gauge(
    "ss_snapshot_games",
    "Number of games in the current snapshot",
)
LIVE_GAMES = Gauge(
    "ss_live_games",
    "Number of live games in the current snapshot, per sport",
    ["sport"],
)


@asynccontextmanager
async def atrack_latency(histogram: Histogram, **labels: str) -> AsyncIterator[None]:
    """Async context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if labels:
            histogram.labels(**labels).observe(elapsed)
        else:
            histogram.observe(elapsed)


def start_metrics_server(port: int | None = None, settings: Settings | None = None) -> None:
    """Start the Prometheus metrics HTTP server."""
    settings = settings or get_settings()
    if not settings.metrics_enabled:
        return
    metrics_port = port or settings.metrics_port
    try:
        start_http_server(metrics_port)
        logger.info("metrics_server_started", port=metrics_port)
    except OSError as exc:
        logger.warning("metrics_server_failed", error=str(exc), port=metrics_port)
