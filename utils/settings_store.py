"""In-memory cache for game settings."""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any

DEFAULT_SETTINGS_PATH = "config/game_settings.json"

_lock = threading.Lock()
_settings_cache: dict[str, Any] = {}
_loaded = False


def settings_path() -> Path:
    return Path(os.getenv("PEWPEW_SETTINGS_PATH", DEFAULT_SETTINGS_PATH))


def _load_json(path: Path) -> Any:
    if not path.exists():
        return {}
    return json.loads(path.read_text())


def refresh_settings() -> dict[str, Any]:
    """Reload settings from disk and replace the cache."""
    global _loaded
    data = _load_json(settings_path())
    if not isinstance(data, dict):
        data = {}
    with _lock:
        _settings_cache.clear()
        _settings_cache.update(data)
        _loaded = True
        return dict(_settings_cache)


def get_settings() -> dict[str, Any]:
    """Return a copy of the cached settings."""
    with _lock:
        if _loaded:
            return dict(_settings_cache)
    return refresh_settings()


def override_settings(data: dict[str, Any]) -> None:
    """Replace the cache without touching disk (embedding and tests)."""
    global _loaded
    with _lock:
        _settings_cache.clear()
        _settings_cache.update(data)
        _loaded = True


def is_deep_logging() -> bool:
    """Return True when log_level requests deep tracing."""
    level = str(get_settings().get("log_level", "")).upper()
    return level in {"DEEP"}


def clear_settings() -> None:
    """Drop the cache so the next ``get_settings`` reads from disk again."""
    global _loaded
    with _lock:
        _settings_cache.clear()
        _loaded = False
