import os
import sys
from datetime import timedelta
import random
import pytest

# Ensure the backend root (containing the `wordduel` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from wordduel import create_app, db, socketio
from wordduel.models import utcnow
from wordduel.services.duels import DuelService
from wordduel.services.duels.notifier import DuelNotifier
from wordduel.services.duels.vocabulary import DatabaseVocabularySource


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    BCRYPT_LOG_ROUNDS = 4
    DUEL_EXPIRY_HOURS = 24
    DUEL_DEFAULT_WORD_COUNT = 5
    DUEL_MAX_WORD_COUNT = 15
    DUEL_NOTIFICATIONS_ENABLED = True


class RecordingNotifier(DuelNotifier):
    def __init__(self):
        self.events = []

    def _deliver(self, event, duel_id, recipient_ids):
        self.events.append((event, duel_id, list(recipient_ids)))

    def of(self, event):
        return [e for e in self.events if e[0] == event]


class FrozenClock:
    def __init__(self, start=None):
        self.now = start or utcnow()

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import wordduel.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


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


def _make_user(username, word_count):
    from wordduel.models import User, Word
    user = User(username=username)
    user.set_password('password')
    db.session.add(user)
    db.session.flush()
    for i in range(word_count):
        db.session.add(Word(
            user_id=user.id,
            original_word=f'{username}-word-{i}',
            translated_word=f'{username}-answer-{i}',
            language='en',
        ))
    db.session.commit()
    return user.id


@pytest.fixture()
def users(flask_app):
    """Alice and Bob have ten words each; Carol has two."""
    return {
        'alice': _make_user('alice', 10),
        'bob': _make_user('bob', 10),
        'carol': _make_user('carol', 2),
    }


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def clock():
    return FrozenClock()


@pytest.fixture()
def service(flask_app, notifier, clock):
    svc = DuelService(
        vocabulary=DatabaseVocabularySource(rng=random.Random(7)),
        notifier=notifier,
        expiry=timedelta(hours=24),
        max_word_count=15,
        clock=clock,
    )
    flask_app.extensions['duels'] = svc
    return svc


def play(service, duel_id, user_id, answers):
    """Submit (is_correct, response_time_ms) pairs in word order; returns the last duel."""
    duel = None
    for index, (correct, time_ms) in enumerate(answers):
        duel = service.submit_answer(duel_id, user_id, index, is_correct=correct, response_time_ms=time_ms)
    return duel
