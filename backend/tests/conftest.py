import os
import sys
import pytest

# Ensure the backend root (containing the `wordle_api` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from wordle_api import create_app, db, socketio
from wordle_api.services.notifications import Notifier


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WORD_LIST_PATH = None
    NOTIFY_INLINE = True
    LOBBY_ONLINE_WINDOW_SEC = 15
    SYNC_MAX_BATCH = 100
    MIN_FIRST_WORD_GAMES = 3
    MIN_MP_H2H_GAMES = 3
    CORS_ORIGINS = ['http://localhost:5173']


class RecordingNotifier(Notifier):
    """Keeps every published event in memory."""

    def __init__(self):
        super().__init__()
        self.published = []

    def _send(self, channel, event, payload):
        self.published.append((channel, event, payload))

    def events(self, channel=None):
        return [e for c, e, _ in self.published if channel is None or c == channel]


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import wordle_api.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def lifecycle(flask_app, notifier):
    from wordle_api.services.rooms import RoomLifecycle
    return RoomLifecycle(db.session, notifier)


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


def make_game(client_game_id, username='alice', outcome='win', guesses=None, target='grate',
              end_time='2026-01-01T10:00:00Z', remaining_counts=None, device_id='device-1'):
    guesses = guesses if guesses is not None else ['crane', 'grate']
    game = {
        'client_game_id': client_game_id,
        'device_id': device_id,
        'username': username,
        'start_time': '2026-01-01T09:55:00Z',
        'end_time': end_time,
        'target_word': target,
        'outcome': outcome,
        'guesses': guesses,
    }
    if remaining_counts is not None:
        game['remaining_counts'] = remaining_counts
    return game
