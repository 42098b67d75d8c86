from game_session.config import ConfigurationError, GameConfig, load_game_config
from game_session.score_tracker import ScoreChange, ScoreTracker
from game_session.session import GameSession
from game_session.session_timer import (
    AsyncioTickScheduler,
    FrameTickScheduler,
    SessionTimer,
    TimerTick,
)
from game_session.state import CharacterId, GamePhase, SessionState, ViewSize

__all__ = [
    "AsyncioTickScheduler",
    "CharacterId",
    "ConfigurationError",
    "FrameTickScheduler",
    "GameConfig",
    "GamePhase",
    "GameSession",
    "ScoreChange",
    "ScoreTracker",
    "SessionState",
    "SessionTimer",
    "TimerTick",
    "ViewSize",
    "load_game_config",
]
