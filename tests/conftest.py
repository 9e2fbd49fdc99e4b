"""Shared fixtures: in-memory SQLite database, fake clock and seeded users"""

from unittest.mock import patch

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import build_engine, init_db
from app.core.gateway import Gateway
from app.repositories.user_repository import UserRepository

START_TS = 1_700_000_000


class FakeClock:
    """Stands in for app.core.clock.now_ts"""

    def __init__(self, start: int = START_TS):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int = 1) -> int:
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    fake = FakeClock()
    with patch("app.core.clock.now_ts", new=fake):
        yield fake


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory, clock):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def gateway(db):
    return Gateway(db)


@pytest.fixture
def users(gateway):
    """Two authors/takers: alice and bob"""
    repo = UserRepository(gateway)
    for user_id, first_name in (("alice", "Alice"), ("bob", "Bob")):
        repo.create(
            {
                "id": user_id,
                "first_name": first_name,
                "last_name": "Tester",
                "email": f"{user_id}@example.com",
                "password_hash": "not-a-real-hash",
            }
        )
    return {"alice": "alice", "bob": "bob"}
