"""Game session state machine: phases, scoring, countdown and snapshot publishing."""

from __future__ import annotations

from typing import TYPE_CHECKING

from game_session.config import ConfigurationError, GameConfig, load_game_config
from game_session.score_tracker import ScoreChange, ScoreTracker
from game_session.session_timer import FrameTickScheduler, SessionTimer, TickScheduler, TimerTick
from game_session.state import CharacterId, GamePhase, SessionState, ViewSize
from utils.event_bus import EventStream, Subscription
from utils.log_utils import deep_log, log

if TYPE_CHECKING:
    from capture_module.base import CaptureService


class GameSession:
    """Authoritative model of one game: Idle -> Running <-> Paused -> Over.

    All mutation happens on the caller's thread; tracker, timer and capture
    notifications are handled synchronously and every relevant change
    publishes a fresh ``SessionState`` on ``states``. Commands issued from a
    phase where they make no sense are ignored rather than raised.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        scheduler: TickScheduler | None = None,
        capture: CaptureService | None = None,
    ) -> None:
        if config is None:
            config = load_game_config()
        if not isinstance(config, GameConfig):
            raise ConfigurationError(f"Expected GameConfig, got {type(config).__name__}")
        self.config = config
        self.scheduler = scheduler or FrameTickScheduler()
        self.states: EventStream[SessionState] = EventStream("session")

        self._tracker = ScoreTracker(config.initial_ammunition)
        self._timer = SessionTimer(self.scheduler, config.tick_interval_seconds)
        self._timer.set_remaining(config.time_limit_seconds)
        self._capture = capture

        self._phase = GamePhase.IDLE
        self._started = False
        self._closed = False
        self._starting = False
        self._final_score: int | None = None
        self._selected_character: CharacterId = config.default_character
        self._view_size = ViewSize()
        self._capture_available = capture.available if capture is not None else True

        self._subscriptions: list[Subscription] = [
            self._tracker.changes.subscribe(self._on_score_changed),
            self._timer.ticks.subscribe(self._on_timer_tick),
        ]
        if capture is not None:
            self._subscriptions.append(capture.hits.subscribe(self._on_capture_hit))
            self._subscriptions.append(capture.availability.subscribe(self._on_availability_changed))

        self._state = self._build_state()

    # Read-only views

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def timer(self) -> SessionTimer:
        return self._timer

    @property
    def tracker(self) -> ScoreTracker:
        return self._tracker

    # Commands

    def start_game(self) -> None:
        if self._closed or self._phase is not GamePhase.IDLE:
            deep_log("GAME", f"start_game ignored in phase {self._phase.value}")
            return
        self._started = True
        self._phase = GamePhase.RUNNING
        self._final_score = None
        self._timer.arm(self.config.time_limit_seconds)
        log(
            "GAME",
            f"Started: ammo={self.config.initial_ammunition} time={self.config.time_limit_seconds}s",
            "INFO",
        )
        if self._capture is not None:
            # Availability is recorded but not published until the reset below.
            self._starting = True
            try:
                self._capture.start_session()
            finally:
                self._starting = False
        # Publishes the fresh snapshot, or ends the game (closing capture) with zero ammo.
        self._tracker.reset()

    def stop_game(self) -> None:
        if self._closed or self._phase not in (GamePhase.RUNNING, GamePhase.PAUSED):
            deep_log("GAME", f"stop_game ignored in phase {self._phase.value}")
            return
        self._halt()
        self._phase = GamePhase.IDLE
        log("GAME", f"Stopped at score={self._tracker.current_score()}", "INFO")
        self._publish()

    def pause_game(self) -> None:
        if self._closed or self._phase is not GamePhase.RUNNING:
            deep_log("GAME", f"pause_game ignored in phase {self._phase.value}")
            return
        self._phase = GamePhase.PAUSED
        self._timer.disarm()
        log("GAME", f"Paused with {self._timer.remaining_seconds}s left", "INFO")
        self._publish()

    def resume_game(self) -> None:
        if self._closed or self._phase is not GamePhase.PAUSED:
            deep_log("GAME", f"resume_game ignored in phase {self._phase.value}")
            return
        self._phase = GamePhase.RUNNING
        self._timer.resume()
        log("GAME", f"Resumed with {self._timer.remaining_seconds}s left", "INFO")
        self._publish()

    def replay_game(self) -> None:
        if self._closed:
            return
        self._halt()
        self._phase = GamePhase.IDLE
        self._final_score = None
        self._timer.set_remaining(self.config.time_limit_seconds)
        self._tracker.reset()
        self.start_game()

    def game_over(self, final_score: int | None = None) -> None:
        """End the game from any phase, optionally recording a collaborator-computed score."""
        if self._closed:
            return
        self._halt()
        self._phase = GamePhase.OVER
        if final_score is not None:
            self._final_score = max(0, int(final_score))
        log("GAME", f"Game over: score={self._current_score()}", "INFO")
        self._publish()

    def register_hit(self, points: int | None = None) -> None:
        if self._closed or self._phase is not GamePhase.RUNNING:
            deep_log("GAME", f"Hit ignored in phase {self._phase.value}")
            return
        if points is None:
            points = self.config.points_per_hit
        deep_log("GAME", f"Hit for {points} points")
        self._tracker.add_hit(points)

    def select_character(self, character: CharacterId) -> None:
        if self._closed:
            return
        self._selected_character = character
        self._publish()

    def update_view_size(self, width: float, height: float) -> None:
        if self._closed:
            return
        self._view_size = ViewSize(width=width, height=height)
        self._publish()

    def close(self) -> None:
        """Revoke every subscription and release the timer and capture."""
        if self._closed:
            return
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()
        self._halt()
        self._closed = True
        self.states.clear()

    # Notification handlers

    def _on_score_changed(self, change: ScoreChange) -> None:
        if self._phase is GamePhase.RUNNING and change.ammunition <= 0:
            self.game_over(final_score=change.score)
            return
        self._publish()

    def _on_timer_tick(self, tick: TimerTick) -> None:
        deep_log("TIMER", f"{tick.remaining_seconds}s remaining")
        if self._phase is GamePhase.RUNNING:
            # Ammunition is checked first; both paths end the game the same way.
            if self._tracker.current_ammunition() <= 0 or tick.expired:
                self.game_over(final_score=self._tracker.current_score())
                return
        self._publish()

    def _on_capture_hit(self, points: int | None) -> None:
        self.register_hit(points)

    def _on_availability_changed(self, available: bool) -> None:
        self._capture_available = bool(available)
        log("CAPTURE", f"Availability changed: {self._capture_available}", "INFO")
        if not self._starting:
            self._publish()

    # Internals

    def _halt(self) -> None:
        self._started = False
        self._timer.disarm()
        if self._capture is not None:
            self._capture.stop_session()

    def _current_score(self) -> int:
        if self._final_score is not None:
            return self._final_score
        return self._tracker.current_score()

    def _build_state(self) -> SessionState:
        return SessionState(
            phase=self._phase,
            score=self._current_score(),
            ammunition=self._tracker.current_ammunition(),
            time_remaining_seconds=self._timer.remaining_seconds,
            selected_character=self._selected_character,
            view_size=self._view_size,
            started=self._started,
            capture_available=self._capture_available,
        )

    def _publish(self) -> None:
        self._state = self._build_state()
        self.states.publish(self._state)
