"""
Persisted user preferences.

A small JSON key-value file that survives restarts: the auto-refresh interval
and the enabled leagues. Reads never fail; a missing or corrupt file yields
defaults. Writes go through a temp file and an atomic replace.
"""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, Optional

from shared.config import DEFAULT_REFRESH_INTERVAL_S, REFRESH_INTERVAL_PRESETS
from shared.models.catalog import League
from shared.utils.logging import get_logger

logger = get_logger(__name__)

REFRESH_INTERVAL_KEY = "refreshInterval"
ENABLED_LEAGUES_KEY = "enabledLeagues"


class PreferencesStore:
    """JSON-file backed key-value store."""

    def __init__(self, path: Path | str, default_refresh_interval_s: float = DEFAULT_REFRESH_INTERVAL_S) -> None:
        self._path = Path(path)
        self._default_interval = default_refresh_interval_s
        self._values: dict[str, Any] = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            logger.warning("preferences_read_failed", path=str(self._path), error=str(exc))
            return {}
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("preferences_corrupt", path=str(self._path), error=str(exc))
            return {}
        if not isinstance(data, dict):
            logger.warning("preferences_corrupt", path=str(self._path), error="top level is not an object")
            return {}
        return data

    def _write(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".prefs-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._values, fh, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        self._write()

    # ── Typed accessors ─────────────────────────────────────────────────

    @property
    def refresh_interval(self) -> float:
        raw = self.get(REFRESH_INTERVAL_KEY)
        if raw is None:
            return self._default_interval
        try:
            value = float(raw)
        except (TypeError, ValueError):
            value = -1.0
        if value not in REFRESH_INTERVAL_PRESETS:
            logger.warning("preferences_interval_invalid", value=raw, default=self._default_interval)
            return self._default_interval
        return value

    @refresh_interval.setter
    def refresh_interval(self, seconds: float) -> None:
        if seconds not in REFRESH_INTERVAL_PRESETS:
            raise ValueError(f"Refresh interval must be one of {REFRESH_INTERVAL_PRESETS}, got {seconds}")
        self.set(REFRESH_INTERVAL_KEY, float(seconds))

    def load_enabled_leagues(self) -> Optional[set[League]]:
        """Persisted league selection, or None when nothing usable was stored."""
        raw = self.get(ENABLED_LEAGUES_KEY)
        if raw is None:
            return None
        if not isinstance(raw, list):
            logger.warning("preferences_leagues_invalid", value=raw)
            return None
        leagues = {league for league in (League.from_id(str(item)) for item in raw) if league is not None}
        dropped = len(raw) - len(leagues)
        if dropped:
            logger.info("preferences_unknown_leagues_dropped", count=dropped)
        return leagues

    def save_enabled_leagues(self, leagues: Iterable[League]) -> None:
        self.set(ENABLED_LEAGUES_KEY, sorted(league.value for league in leagues))
