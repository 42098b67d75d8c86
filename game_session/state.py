"""Session phases and the immutable snapshot published to presentation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

CharacterId = str


class GamePhase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    OVER = "over"


@dataclass(frozen=True)
class ViewSize:
    """Presentation hint; the core never interprets it."""

    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class SessionState:
    """Consolidated view of a game session at one instant.

    A new instance is built on every relevant mutation; presentation can
    re-render on any snapshot without diffing.
    """

    phase: GamePhase
    score: int
    ammunition: int
    time_remaining_seconds: int
    selected_character: CharacterId
    view_size: ViewSize = ViewSize()
    started: bool = False
    capture_available: bool = True

    @property
    def is_running(self) -> bool:
        return self.phase is GamePhase.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.phase is GamePhase.PAUSED

    @property
    def is_over(self) -> bool:
        return self.phase is GamePhase.OVER

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "score": self.score,
            "ammunition": self.ammunition,
            "time_remaining_seconds": self.time_remaining_seconds,
            "selected_character": self.selected_character,
            "view_size": {"width": self.view_size.width, "height": self.view_size.height},
            "started": self.started,
            "capture_available": self.capture_available,
        }
