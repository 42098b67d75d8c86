"""Timestamped logging helpers."""

from __future__ import annotations

import builtins
import time
from typing import Any


_LEVELS = {"DEEP", "DEBUG", "INFO", "WARN", "ERROR"}


def _split_tags(message: str) -> tuple[list[str], str]:
    tags: list[str] = []
    remaining = message.lstrip()
    while remaining.startswith("["):
        end = remaining.find("]")
        if end == -1:
            break
        tag = remaining[1:end].strip()
        if not tag:
            break
        tags.append(tag)
        remaining = remaining[end + 1 :].lstrip()
    return tags, remaining


def format_message(message: str) -> str:
    """Normalize leading tags to ``[SYSTEM][LEVEL] [extra] text``."""
    tags, remaining = _split_tags(message)
    if not tags:
        return f"[GAME] {remaining}" if remaining else "[GAME]"
    first = tags[0].upper()
    if first in _LEVELS:
        variant: str | None = first
        system = tags[1] if len(tags) > 1 else "GAME"
    else:
        system = tags[0]
        variant = tags[1].upper() if len(tags) > 1 else None
    extra_tags = tags[2:]
    head = f"[{system}][{variant}]" if variant else f"[{system}]"
    extra = f" [{' '.join(extra_tags)}]" if extra_tags else ""
    suffix = f" {remaining}" if remaining else ""
    return f"{head}{extra}{suffix}"


def tprint(*args: Any, **kwargs: Any) -> None:
    """Print with a timestamp prefix and normalized tag order."""
    timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
    message = " ".join(str(arg) for arg in args)
    builtins.print(f"[{timestamp}]{format_message(message)}", **kwargs)


def log(system: str, message: str, variant: str | None = None) -> None:
    """Log with explicit system and optional variant."""
    if variant:
        tprint(f"[{system}][{variant}] {message}")
    else:
        tprint(f"[{system}] {message}")


def deep_log(system: str, message: str) -> None:
    """Log only when settings request deep tracing (per tick / per hit noise)."""
    from utils.settings_store import is_deep_logging

    if is_deep_logging():
        log(system, message, "DEEP")
