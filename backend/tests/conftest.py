import random

import pytest

from sketchspy.game.room import GameRoom
from sketchspy.realtime.timers import ScheduledTask
from sketchspy.server import create_app


class TestConfig:
    TESTING = True
    SECRET_KEY = "test-secret"
    CORS_ORIGINS = "*"
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = "threading"
    LOG_LEVEL = "DEBUG"
    RANDOM_SEED = "1234"
    MIN_PLAYERS = 3
    MAX_PLAYERS = 8
    ROLE_REVEAL_DURATION_SEC = 5
    VOTING_DURATION_SEC = 30
    IMPOSTER_GUESS_DURATION_SEC = 20
    ENFORCE_PHASE_TIMERS = True


class ManualScheduler:
    """Collects scheduled callbacks; tests fire them explicitly."""

    def __init__(self):
        self.tasks = []

    def schedule(self, name, delay_sec, callback):
        task = ScheduledTask(name, delay_sec)
        self.tasks.append((task, callback))
        return task

    def pending(self):
        return [task for task, _ in self.tasks if not task.cancelled]

    def fire(self, suffix):
        for i in range(len(self.tasks) - 1, -1, -1):
            task, callback = self.tasks[i]
            if task.name.endswith(suffix) and not task.cancelled:
                del self.tasks[i]
                callback(task)
                return task
        raise AssertionError(f"no pending timer ending with {suffix!r}")


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def config_overrides():
    """Override with @pytest.mark.parametrize("config_overrides", [{...}])."""
    return {}


@pytest.fixture()
def app_and_socketio(scheduler, config_overrides):
    config = type("TestConfigVariant", (TestConfig,), config_overrides) if config_overrides else TestConfig
    return create_app(config, scheduler=scheduler)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions["sketchspy"]["registry"]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_clients(app_and_socketio):
    """Factory for Socket.IO test clients, disconnected on teardown."""
    app, socketio = app_and_socketio
    created = []

    def _make():
        c = socketio.test_client(app, flask_test_client=app.test_client())
        created.append(c)
        return c

    yield _make

    for c in created:
        try:
            if c.is_connected():
                c.disconnect()
        except Exception:
            pass


@pytest.fixture()
def room():
    return GameRoom("ABCD", rng=random.Random(7))


@pytest.fixture()
def ready_room():
    """Factory: a lobby with ``n`` ready players, the first one hosting."""

    def _make(n, seed=7, **kwargs):
        r = GameRoom("WXYZ", rng=random.Random(seed), **kwargs)
        for i in range(n):
            r.add_player(f"P{i}", is_host=(i == 0)).is_ready = True
        return r

    return _make
