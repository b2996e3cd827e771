import os
import sys
import pytest

# Ensure the backend root (containing the `quizroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from quizroom import create_app, db


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BCRYPT_LOG_ROUNDS = 4
    CORS_ORIGINS = []
    QUESTION_TIME_LIMIT_SEC = 15
    POINTS_PER_CORRECT = 500
    MAX_SPEED_BONUS = 500
    ROOM_CODE_LENGTH = 6
    ROOM_CODE_ATTEMPTS = 5


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import quizroom.models  # noqa: F401
        db.create_all()
    # Requests push their own app context; Flask-Login caches the user on g
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_ctx(flask_app):
    with flask_app.app_context():
        yield flask_app


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_user(app_ctx):
    """Create a user row directly, for service-level tests."""
    from quizroom.models import User

    def _make(username, display_name=None):
        user = User(username=username, display_name=display_name)
        user.set_password('password')
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture()
def login_as(flask_app):
    """Register a user and return a test client holding their login cookie."""

    def _login(username, name=None):
        test_client = flask_app.test_client()
        res = test_client.post('/api/auth/register', json={'username': username, 'password': 'password', 'name': name})
        assert res.status_code == 201
        test_client.user = res.get_json()['user']
        return test_client

    return _login


def set_round_start(room_id, question_index, seconds_ago, app=None):
    """Backdate a question window so answers see a known elapsed time.

    Pass ``app`` when no app context is active (HTTP tests).
    """
    if app is not None:
        with app.app_context():
            return set_round_start(room_id, question_index, seconds_ago)

    import time
    from quizroom.models import QuestionRound

    round_ = QuestionRound.query.filter_by(room_id=room_id, question_index=question_index).one()
    round_.started_at = time.time() - seconds_ago
    db.session.add(round_)
    db.session.commit()
