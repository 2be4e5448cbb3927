"""Shared fixtures: in-memory database, controllable clock, service container."""

import threading
from datetime import datetime, timedelta
from itertools import count

import pytest
from fastapi.testclient import TestClient

from sydai.api.main import create_app
from sydai.auth.models import UserAccount
from sydai.exceptions import PointsError
from sydai.services import build_services
from sydai.settings import Settings
from sydai.storage.db import Database

SCRIPTED_REPLY = "Scripted reply"


class FakeClock:
    """Clock whose current instant is set by the test."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def run_concurrently(fn, workers: int = 2) -> list:
    """Run ``fn`` in several threads released at the same moment.

    Returns:
        One ``("ok", value)`` or ``("error", exception)`` tuple per worker
    """
    barrier = threading.Barrier(workers)
    results = []
    lock = threading.Lock()

    def worker(index):
        barrier.wait()
        try:
            outcome = ("ok", fn(index))
        except PointsError as e:
            outcome = ("error", e)
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    return results


@pytest.fixture
def config():
    return Settings(
        env="test",
        log_level="WARNING",
        database_url="sqlite://",
        jwt_secret_key="test-secret-key-that-is-long-enough-for-hs256",
        public_base_url="https://sydai.test",
    )


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 1, 1, 12, 0))


@pytest.fixture
def db():
    """Fresh in-memory database."""
    database = Database("sqlite://")
    database.create_tables()
    yield database
    database.dispose()


@pytest.fixture
def file_db(tmp_path):
    """File-backed database; each thread gets its own connection."""
    database = Database(f"sqlite:///{tmp_path / 'sydai-test.db'}")
    database.create_tables()
    yield database
    database.dispose()


@pytest.fixture
def services(db, config, clock):
    return build_services(db, config, clock=clock, responder=lambda content: SCRIPTED_REPLY)


@pytest.fixture
def file_services(file_db, config, clock):
    return build_services(file_db, config, clock=clock, responder=lambda content: SCRIPTED_REPLY)


def _user_factory(services):
    sequence = count(1)

    def make_user(username: str | None = None, points: int = 0) -> UserAccount:
        """Insert a user directly (no bcrypt) and fund it through the ledger."""
        n = next(sequence)
        username = username or f"user{n:03d}"
        with services.db.session() as session:
            user = UserAccount(
                username=username,
                email=f"{username.lower()}@example.com",
                password_hash="not-a-real-hash",
                points=0,
            )
            session.add(user)
            session.flush()
        if points:
            services.ledger.award_points(user.id, points, operation="adjustment")
        return services.ledger.get_user(user.id)

    return make_user


@pytest.fixture
def make_user(services):
    return _user_factory(services)


@pytest.fixture
def make_file_user(file_services):
    return _user_factory(file_services)


@pytest.fixture
def app(config, db, clock):
    return create_app(config=config, database=db, clock=clock)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register a user over HTTP and return (user_json, auth_headers)."""

    def _register(username: str, referral_code: str | None = None):
        body = {
            "email": f"{username.lower()}@example.com",
            "username": username,
            "password": "secret123",
        }
        if referral_code is not None:
            body["referral_code"] = referral_code
        response = client.post("/api/v1/auth/register", json=body)
        assert response.status_code == 201, response.text
        data = response.json()
        return data["user"], {"Authorization": f"Bearer {data['access_token']}"}

    return _register
