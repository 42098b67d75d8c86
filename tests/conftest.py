import pytest

from game_session import FrameTickScheduler, GameConfig, GameSession
from utils.settings_store import override_settings


@pytest.fixture(autouse=True)
def quiet_settings():
    override_settings({"log_level": "INFO"})
    yield


@pytest.fixture()
def scheduler():
    return FrameTickScheduler()


@pytest.fixture()
def make_session(scheduler):
    def _make(ammo: int = 3, time_limit: int = 60, **kwargs) -> GameSession:
        config = GameConfig(initial_ammunition=ammo, time_limit_seconds=time_limit)
        return GameSession(config, scheduler=scheduler, **kwargs)

    return _make
