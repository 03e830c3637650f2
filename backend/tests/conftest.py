import os
import sys
from collections import defaultdict

import pytest

# Ensure the backend root (containing the `quiznight` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from quiznight import create_app, db, socketio
from quiznight.services.games import GameEngine, Question, SessionRegistry, TimerHandle


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    ROUND_DURATION_SEC = 20
    BASE_POINTS = 500
    GAME_CODE_MAX_ATTEMPTS = 1000
    CORS_ORIGINS = '*'
    LOG_LEVEL = 'DEBUG'


SAMPLE_QUIZ = {
    'title': 'Capitals',
    'questions': [
        {'question': 'Capital of France?', 'options': ['Paris', 'Rome'], 'correctAnswer': 'Paris'},
        {'question': 'Capital of Italy?', 'options': ['Paris', 'Rome'], 'correctAnswer': 'Rome'},
    ],
}

QUESTIONS = (
    Question(prompt='2 + 2?', options=('3', '4', '5'), correct_answer='4'),
    Question(prompt='Largest ocean?', options=('Atlantic', 'Pacific'), correct_answer='Pacific'),
)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import quiznight.models  # noqa: F401
        db.create_all()
        yield application
        application.extensions['quiznight'].registry.close()
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


# ---- In-memory collaborators for engine tests ----

class RecordingGateway:
    def __init__(self):
        self.events = []
        self.rooms = defaultdict(list)

    def subscribe(self, connection_id, game_code):
        if connection_id not in self.rooms[game_code]:
            self.rooms[game_code].append(connection_id)

    def publish(self, game_code, event, payload):
        self.events.append(('room', game_code, event, payload))

    def send(self, connection_id, event, payload):
        self.events.append(('direct', connection_id, event, payload))

    def close_room(self, game_code):
        self.rooms.pop(game_code, None)

    def named(self, event):
        return [payload for _, _, name, payload in self.events if name == event]

    def clear(self):
        self.events.clear()


class ManualScheduler:
    def __init__(self):
        self.timers = []

    def schedule(self, delay, callback):
        handle = TimerHandle(delay)
        self.timers.append((handle, callback))
        return handle

    @property
    def pending(self):
        return [h for h, _ in self.timers if not h.cancelled]

    def fire(self, index=-1, ignore_cancel=False):
        """Run a timer callback; ``ignore_cancel`` mimics a late-firing timer."""
        handle, callback = self.timers[index]
        if ignore_cancel or not handle.cancelled:
            return callback()
        return None


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def gateway():
    return RecordingGateway()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def engine(gateway, scheduler, clock):
    return GameEngine(
        registry=SessionRegistry(),
        gateway=gateway,
        scheduler=scheduler,
        clock=clock,
        round_duration=20,
        base_points=500,
    )


@pytest.fixture()
def questions():
    return QUESTIONS


@pytest.fixture()
def sample_quiz():
    return {
        'title': SAMPLE_QUIZ['title'],
        'questions': [dict(q) for q in SAMPLE_QUIZ['questions']],
    }
