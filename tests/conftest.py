import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from catgallery.auth import session_cookie, users
from catgallery.auth.passwords import hash_password
from catgallery.core import config
from catgallery.main import create_app
from catgallery.models.user import Role, User

TEST_SESSION_SECRET = 'test-secret'


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'PASSWORD_HASH_ROUNDS', 4)


@pytest.fixture
def engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def app(engine):
    return create_app(engine=engine, session_secret=TEST_SESSION_SECRET)


@pytest.fixture
def context(app):
    return app.state.context


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def new_client(app, client):
    """Open extra browsers against the same app; ``client`` has already created the schema."""
    opened: list[TestClient] = []

    def _new_client() -> TestClient:
        test_client = TestClient(app)
        opened.append(test_client)
        return test_client

    yield _new_client

    for test_client in opened:
        test_client.close()


@pytest.fixture
def create_user(context, client):
    def _create_user(name: str, email: str, password: str, role: Role = Role.USER) -> int:
        db = context.session_factory()
        try:
            user = users.create_user(db, name, email, hash_password(password))
            if role is not Role.USER:
                users.set_role(db, user.id, role)
            return user.id
        finally:
            db.close()

    return _create_user


@pytest.fixture
def stored_role(context):
    def _stored_role(user_id: int) -> str | None:
        db = context.session_factory()
        try:
            user = db.get(User, user_id)
            return user.role if user else None
        finally:
            db.close()

    return _stored_role


@pytest.fixture
def session_user(context):
    """Read the user snapshot held by a client's current session."""
    def _session_user(test_client: TestClient) -> dict | None:
        token = test_client.cookies.get(context.session_cookie_name)
        if not token:
            return None
        session_id = session_cookie.decode_session_id(token, TEST_SESSION_SECRET)
        data = context.sessions.get(session_id)
        return data.get('user') if data else None

    return _session_user


def signup(test_client: TestClient, name: str, email: str, password: str):
    return test_client.post(
        '/signup',
        data={'name': name, 'email': email, 'password': password},
        follow_redirects=False,
    )


def login(test_client: TestClient, email: str, password: str):
    return test_client.post(
        '/login',
        data={'email': email, 'password': password},
        follow_redirects=False,
    )


@pytest.fixture
def do_signup():
    return signup


@pytest.fixture
def do_login():
    return login
