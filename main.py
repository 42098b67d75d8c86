"""Entry point: run one gesture-driven game session on an asyncio loop."""

from __future__ import annotations

import argparse
import asyncio
import json
import os
from pathlib import Path

from dotenv import load_dotenv

from capture_module import CameraCaptureService
from game_session import (
    AsyncioTickScheduler,
    ConfigurationError,
    GameConfig,
    GamePhase,
    GameSession,
    SessionState,
    load_game_config,
)
from utils.log_utils import log, tprint
from utils.settings_store import refresh_settings


def _read_settings() -> dict:
    """Reload the settings file, reporting a malformed one as a configuration error."""
    try:
        return refresh_settings()
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Malformed settings file: {exc}") from exc


def _is_enabled(name: str, default: bool = True) -> bool:
    """Read a boolean-like environment variable (1/0/true/false)."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _load_env_files() -> None:
    """Load .env files from the working directory and the module root."""
    module_root = Path(__file__).resolve().parent
    candidates = [
        Path.cwd() / "env/.env",
        Path.cwd() / ".env",
        module_root / "env/.env",
        module_root / ".env",
    ]
    for path in candidates:
        if path.exists():
            load_dotenv(dotenv_path=str(path), override=False)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a timed hand-tracking shooting session.")
    parser.add_argument("--ammo", type=int, default=None, help="Override initial ammunition.")
    parser.add_argument("--time-limit", type=int, default=None, help="Override time limit in seconds.")
    parser.add_argument("--character", default=None, help="Character to play as.")
    parser.add_argument(
        "--no-camera",
        action="store_true",
        help="Run without opening the camera (timer only).",
    )
    return parser


class ConsolePresenter:
    """Prints snapshots; stands in for a real UI binding."""

    def __init__(self) -> None:
        self._last: SessionState | None = None

    def __call__(self, state: SessionState) -> None:
        last, self._last = self._last, state
        if last is not None and last.phase is state.phase and last.score == state.score:
            if state.time_remaining_seconds % 10:
                return
        tprint(
            f"[UI] phase={state.phase.value} score={state.score} ammo={state.ammunition} "
            f"time={state.time_remaining_seconds}s camera={'on' if state.capture_available else 'off'}"
        )


def _apply_overrides(config: GameConfig, args: argparse.Namespace) -> GameConfig:
    values = {
        "initial_ammunition": config.initial_ammunition if args.ammo is None else args.ammo,
        "time_limit_seconds": config.time_limit_seconds if args.time_limit is None else args.time_limit,
        "default_character": args.character or config.default_character,
        "tick_interval_seconds": config.tick_interval_seconds,
        "points_per_hit": config.points_per_hit,
    }
    return GameConfig(**values)


async def run_session(session: GameSession) -> SessionState:
    """Start the session and wait until it reaches Over."""
    finished = asyncio.Event()

    def _watch(state: SessionState) -> None:
        if state.phase is GamePhase.OVER:
            finished.set()

    watcher = session.states.subscribe(_watch)
    session.start_game()
    try:
        await finished.wait()
    finally:
        watcher.cancel()
    return session.state


def bootstrap(argv: list[str] | None = None) -> int:
    """Wire up config, capture and session, then play one game."""
    args = _build_parser().parse_args(argv)
    _load_env_files()
    try:
        settings = _read_settings()
        config = _apply_overrides(load_game_config(settings), args)
    except ConfigurationError as exc:
        log("MAIN", f"Invalid configuration: {exc}", "ERROR")
        return 2

    use_camera = not args.no_camera and _is_enabled("PEWPEW_ENABLE_CAMERA", True)
    capture = CameraCaptureService.from_settings(settings) if use_camera else None

    async def _main() -> SessionState:
        session = GameSession(config, scheduler=AsyncioTickScheduler(), capture=capture)
        session.states.subscribe(ConsolePresenter())
        try:
            return await run_session(session)
        finally:
            session.close()

    try:
        final = asyncio.run(_main())
    except KeyboardInterrupt:
        log("MAIN", "Received interrupt. Shutting down...", "INFO")
        return 130
    log("MAIN", f"Final score: {final.score}", "INFO")
    return 0


if __name__ == "__main__":
    raise SystemExit(bootstrap())
