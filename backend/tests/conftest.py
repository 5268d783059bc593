import os
import sys
import pytest

# Ensure the backend root (containing the `cardclash` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from cardclash import create_app, socketio

NAMESPACE = '/ws'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = '*'
    SOCKETIO_NAMESPACE = NAMESPACE
    START_DELAY_SEC = 0
    ROUND_DELAY_SEC = 5
    FINALIZE_DELAY_SEC = 3
    SESSION_RETENTION_SEC = 10
    TIE_POLICY = 'both'
    SCHEDULER = 'manual'
    RANDOM_SEED = 1234


def make_card(name='Card', a=3, b=3, c=3, d=3, e=3):
    return {'name': name, 'attributes': {'A': a, 'B': b, 'C': c, 'D': d, 'E': e}}


def make_deck(prefix='Card', **values):
    return [make_card(f"{prefix} {i + 1}", **values) for i in range(7)]


class EventRecorder:
    """Stand-in for the Socket.IO emitter; keeps every addressed event."""

    def __init__(self):
        self.events = []

    def __call__(self, event, payload, to):
        self.events.append((event, payload, to))

    def to(self, sid, event=None):
        return [p for (e, p, t) in self.events if t == sid and (event is None or e == event)]

    def names(self, sid):
        return [e for (e, _, t) in self.events if t == sid]


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def coordinator(flask_app):
    return flask_app.extensions['cardclash']


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, namespace=NAMESPACE)
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected(NAMESPACE):
                test_client.disconnect(namespace=NAMESPACE)
        except RuntimeError:
            pass


@pytest.fixture()
def threaded_app():
    """Builds apps whose timers run as real Socket.IO background tasks."""
    def _make(**overrides):
        settings = {
            'SCHEDULER': 'socketio',
            'START_DELAY_SEC': 0,
            'ROUND_DELAY_SEC': 0.05,
            'FINALIZE_DELAY_SEC': 0.05,
            'SESSION_RETENTION_SEC': 0.2,
        }
        settings.update(overrides)
        return create_app(type('ThreadedConfig', (TestConfig,), settings))
    return _make


@pytest.fixture()
def recorder():
    return EventRecorder()
