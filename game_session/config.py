"""Game configuration: read once at construction, immutable afterwards."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any

from game_session.state import CharacterId
from utils.settings_store import get_settings


class ConfigurationError(ValueError):
    """Raised when a session would start with undefined countdown or ammo behavior."""


@dataclass(frozen=True)
class GameConfig:
    initial_ammunition: int = 10
    time_limit_seconds: int = 60
    default_character: CharacterId = "sheriff_beq"
    tick_interval_seconds: float = 1.0
    points_per_hit: int = 1

    def __post_init__(self) -> None:
        if self.time_limit_seconds <= 0:
            raise ConfigurationError(
                f"time_limit_seconds must be positive (got {self.time_limit_seconds})"
            )
        if self.initial_ammunition < 0:
            raise ConfigurationError(
                f"initial_ammunition must not be negative (got {self.initial_ammunition})"
            )
        if self.tick_interval_seconds <= 0:
            raise ConfigurationError(
                f"tick_interval_seconds must be positive (got {self.tick_interval_seconds})"
            )
        if self.points_per_hit < 0:
            raise ConfigurationError(
                f"points_per_hit must not be negative (got {self.points_per_hit})"
            )
        if not str(self.default_character).strip():
            raise ConfigurationError("default_character must not be empty")


_ENV_OVERRIDES = {
    "initial_ammunition": ("PEWPEW_INITIAL_AMMUNITION", int),
    "time_limit_seconds": ("PEWPEW_TIME_LIMIT_SECONDS", int),
    "default_character": ("PEWPEW_DEFAULT_CHARACTER", str),
    "tick_interval_seconds": ("PEWPEW_TICK_INTERVAL", float),
    "points_per_hit": ("PEWPEW_POINTS_PER_HIT", int),
}


def _coerce(key: str, raw: Any, kind: type) -> Any:
    try:
        return kind(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid value for {key}: {raw!r}") from exc


def load_game_config(settings: dict[str, Any] | None = None) -> GameConfig:
    """Build a GameConfig from the ``game`` settings section plus env overrides."""
    if settings is None:
        try:
            settings = get_settings()
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Malformed settings file: {exc}") from exc
    section = settings.get("game") or {}
    if not isinstance(section, dict):
        raise ConfigurationError("'game' settings section must be an object")

    values: dict[str, Any] = {}
    for key, (env_name, kind) in _ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None or not raw.strip():
            raw = section.get(key)
        if raw is None:
            continue
        values[key] = _coerce(key, raw, kind)
    return GameConfig(**values)
