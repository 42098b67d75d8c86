"""Score and ammunition bookkeeping for one session."""

from __future__ import annotations

from dataclasses import dataclass

from utils.event_bus import EventStream


@dataclass(frozen=True)
class ScoreChange:
    score: int
    ammunition: int


class ScoreTracker:
    """Owns score and remaining ammunition.

    Every mutation emits exactly one ``ScoreChange`` on ``changes`` after all
    fields are updated. Out-of-range input is clamped, never rejected.
    """

    def __init__(self, initial_ammunition: int) -> None:
        self.initial_ammunition = max(0, int(initial_ammunition))
        self._score = 0
        self._ammunition = self.initial_ammunition
        self.changes: EventStream[ScoreChange] = EventStream("score")

    def current_score(self) -> int:
        return self._score

    def current_ammunition(self) -> int:
        return self._ammunition

    def add_hit(self, points: int) -> None:
        self._score += max(0, int(points))
        self._ammunition = max(0, self._ammunition - 1)
        self._emit()

    def reset(self) -> None:
        self._score = 0
        self._ammunition = self.initial_ammunition
        self._emit()

    def _emit(self) -> None:
        self.changes.publish(ScoreChange(score=self._score, ammunition=self._ammunition))
