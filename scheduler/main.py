"""
Headless entrypoint.
Runs auto-refresh until SIGINT/SIGTERM and logs a summary of every snapshot.

Usage:
  python -m scheduler.main          # keep refreshing
  python -m scheduler.main --once   # one refresh, print the games, exit
"""
from __future__ import annotations

import asyncio
import signal
import sys

from shared.config import get_settings
from shared.models.domain import Game
from shared.utils.logging import get_logger, setup_logging
from shared.utils.metrics import start_metrics_server

from scheduler.refresh import RefreshController
from scheduler.service import ScoresService

logger = get_logger(__name__)


def _log_snapshot(controller: RefreshController) -> None:
    if controller.last_error is not None:
        logger.warning(
            "snapshot_stale",
            error=str(controller.last_error),
            games=len(controller.games),
            last_updated=controller.last_updated.isoformat() if controller.last_updated else None,
        )
        return
    failed = [league.value for league, status in controller.league_statuses.items() if not status.success]
    logger.info(
        "snapshot_updated",
        games=len(controller.games),
        live=sum(1 for g in controller.games if g.is_live),
        failed_leagues=failed,
    )


def _format_game(game: Game) -> str:
    away, home = game.away_team, game.home_team
    score = ""
    if game.away_score is not None and game.home_score is not None:
        score = f" {game.away_score}-{game.home_score}"
    return (
        f"[{game.league.display_name}] {away.abbreviation} @ {home.abbreviation}{score}"
        f"  {game.display_date()} {game.display_time()}"
    )


async def run_once(service: ScoresService) -> int:
    await service.refresh()
    if service.last_error is not None:
        logger.error("refresh_failed", error=str(service.last_error))
        return 1
    for game in service.filtered_games:
        print(_format_game(game))
    return 0


async def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = get_settings()
    setup_logging("scores", settings=settings)
    start_metrics_server(settings=settings)

    async with ScoresService(settings) as service:
        if "--once" in argv:
            return await run_once(service)

        service.add_listener(_log_snapshot)
        shutdown = asyncio.Event()

        def on_signal() -> None:
            shutdown.set()

        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                asyncio.get_running_loop().add_signal_handler(sig, on_signal)
            except NotImplementedError:
                pass

        service.start_auto_refresh()
        logger.info("scores_started", interval_s=service.refresh_interval)
        await shutdown.wait()

    logger.info("scores_stopped")
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
