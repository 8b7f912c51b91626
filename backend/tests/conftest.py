import os
import sys
import random
import pytest

# Ensure the backend root (containing the `arena` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from arena import create_app, socketio
from arena.services.game.settings import GameSettings
from arena.services.game.rooms import RoomStore
from arena.services.game.matchmaking import Matchmaker
from arena.services.game.commands import GameCommandHandler


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    ALLOWED_ORIGINS = ['http://localhost:3000']


class FakeRegistry:
    """Records what the services send instead of talking to Socket.IO."""

    def __init__(self):
        self.live = set()
        self.sent = []
        self.broadcasts = []
        self.groups = {}

    def connected(self, sid):
        self.live.add(sid)

    def disconnected(self, sid):
        self.live.discard(sid)

    def is_live(self, sid):
        return sid in self.live

    def enroll(self, sid, room):
        self.groups.setdefault(room, set()).add(sid)

    def withdraw(self, sid, room):
        self.groups.get(room, set()).discard(sid)

    def send(self, sid, event, payload=None):
        self.sent.append((sid, event, payload))

    def broadcast(self, room, event, payload=None, skip_sid=None):
        self.broadcasts.append((room, event, payload, skip_sid))

    def events_for(self, sid):
        return [(event, payload) for s, event, payload in self.sent if s == sid]

    def broadcast_events(self, event):
        return [b for b in self.broadcasts if b[1] == event]


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application
    application.extensions['arena'].simulation.stop()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
    )
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass


@pytest.fixture()
def make_sio_client(flask_app):
    clients = []

    def _make():
        c = socketio.test_client(flask_app)
        clients.append(c)
        return c

    yield _make
    for c in clients:
        if c.is_connected():
            c.disconnect()


@pytest.fixture()
def settings():
    return GameSettings()


@pytest.fixture()
def registry():
    return FakeRegistry()


@pytest.fixture()
def store(registry, settings):
    return RoomStore(registry, settings, rng=random.Random(7))


@pytest.fixture()
def matchmaker(registry, store):
    return Matchmaker(registry, store, rng=random.Random(11))


@pytest.fixture()
def commands(registry, store, settings):
    return GameCommandHandler(registry, store, settings, rng=random.Random(3))
