"""Shared test fixtures for blog-core."""

import os
import tempfile

# Keep the app's startup database out of the working tree and make bcrypt fast.
# Must happen before blog_core.config is imported.
os.environ.setdefault("DATABASE_PATH", os.path.join(tempfile.gettempdir(), "blog-core-test.db"))
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")

import sqlite3
from datetime import datetime, timedelta, UTC

import jwt
import pytest

from blog_core.auth.password import PasswordHasher
from blog_core.config import settings
from blog_core.db import SCHEMA_PATH
from blog_core.db.post import PostOperations
from blog_core.db.user import UserOperations
from blog_core.main import app
from blog_core.schemas import User


class FakeClock:
    """Deterministic clock: every call advances one second."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


def make_token(user_id, secret: str | None = None, expires_in: timedelta = timedelta(hours=1)) -> str:
    """Mint an access token the way the external issuer does."""
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    return jwt.encode(payload, secret or settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def bearer(user_id) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def test_db():
    """Create in-memory test database with schema."""
    db = sqlite3.connect(":memory:")
    db.row_factory = sqlite3.Row

    # Enable foreign key constraints (required for SQLite)
    db.execute("PRAGMA foreign_keys = ON")

    db.executescript(SCHEMA_PATH.read_text())
    db.commit()

    yield db

    db.close()


@pytest.fixture
def hasher():
    return PasswordHasher(work_factor=4)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def users(test_db, hasher, clock):
    return UserOperations(test_db, hasher=hasher, clock=clock)


@pytest.fixture
def posts(test_db, users, clock):
    return PostOperations(test_db, users, clock=clock)


@pytest.fixture
def alice(users):
    return users.create(User(nickname="alice", email="a@x.com", password="secret"))


@pytest.fixture
def bob(users):
    return users.create(User(nickname="bob", email="b@x.com", password="hunter2"))


@pytest.fixture
def client():
    """Create test client for API testing.

    Each test gets a fresh temp-file database.
    """
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    original_db_path = settings.database_path
    try:
        settings.database_path = db_path

        from blog_core.db import init_db
        init_db()

        app.config['TESTING'] = True
        with app.test_client() as client:
            yield client

    finally:
        settings.database_path = original_db_path
        try:
            os.unlink(db_path)
        except OSError:
            pass


@pytest.fixture
def register(client):
    """Register a user through the API and return the response JSON."""
    def _register(nickname: str, email: str, password: str = "secret") -> dict:
        response = client.post(
            "/api/v1/users",
            json={"nickname": nickname, "email": email, "password": password}
        )
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _register
