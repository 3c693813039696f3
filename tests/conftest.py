"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# Ensure a valid JWT_SECRET is always set for test runs.
# This must happen before any import of gitadora.api.deps which validates
# the secret at module-load time.
# ---------------------------------------------------------------------------
_TEST_JWT_SECRET = "test-secret-for-pytest-only-" + "x" * 40  # > 32 chars
os.environ.setdefault("JWT_SECRET", _TEST_JWT_SECRET)

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from gitadora.config import TrackerConfig  # noqa: E402
from gitadora.database.models import (  # noqa: E402
    Base,
    Difficulty,
    InstrumentType,
    SkillRecord,
    User,
    UserRole,
)

TEST_VERSION = "GITADORA GALAXY WAVE DELTA"


@pytest.fixture
def db_engine() -> Engine:
    """Create an in-memory SQLite engine with all tables.

    Uses StaticPool so the TestClient's worker threads share the same
    in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(db_engine: Engine):
    """Provide a session that rolls back after each test."""
    with Session(db_engine) as session:
        yield session
        session.rollback()


@pytest.fixture
def test_config() -> TrackerConfig:
    return TrackerConfig(
        site_name="Test Tracker",
        default_instrument=InstrumentType.GUITAR,
        default_version=TEST_VERSION,
        api_port=8000,
    )


def make_token(sub: str = "1", username: str = "Player", role: str = "USER") -> str:
    """Create a signed JWT.  Usable from tests and fixtures alike."""
    import jwt

    from gitadora.api.deps import JWT_ALGORITHM, JWT_SECRET

    return jwt.encode(
        {"sub": sub, "username": username, "role": role},
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )


@pytest.fixture
def admin_token():
    return make_token(sub="99999", username="FixtureAdmin", role="ADMIN")


@pytest.fixture
def user_token():
    return make_token(sub="67890", username="RegularUser", role="USER")


@pytest.fixture
def client(db_engine, test_config):
    """FastAPI TestClient wired to the SQLite engine and a fixed config."""
    from fastapi.testclient import TestClient

    from gitadora.api.deps import get_config, get_engine
    from gitadora.api.main import app

    app.dependency_overrides[get_engine] = lambda: db_engine
    app.dependency_overrides[get_config] = lambda: test_config
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Row factories
# ---------------------------------------------------------------------------
def add_user(
    session: Session,
    name: str = "player",
    *,
    ingame_name: str | None = None,
    title: str | None = None,
    gitadora_id: str | None = None,
    role: UserRole = UserRole.USER,
) -> User:
    user = User(
        name=name,
        ingame_name=ingame_name,
        title=title,
        gitadora_id=gitadora_id,
        role=role,
    )
    session.add(user)
    session.flush()
    return user


def add_record(
    session: Session,
    user_id: int,
    song_title: str,
    *,
    skill_score: float,
    achievement: float = 90.0,
    is_hot: bool = False,
    instrument_type: InstrumentType = InstrumentType.GUITAR,
    difficulty: Difficulty = Difficulty.MASTER,
    version: str | None = TEST_VERSION,
    played_at: datetime | None = None,
) -> SkillRecord:
    record = SkillRecord(
        user_id=user_id,
        song_title=song_title,
        instrument_type=instrument_type,
        difficulty=difficulty,
        achievement=achievement,
        skill_score=skill_score,
        is_hot=is_hot,
        version=version,
        played_at=played_at or datetime(2026, 1, 15, 12, 0, 0),
    )
    session.add(record)
    session.flush()
    return record
