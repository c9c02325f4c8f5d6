"""Shared fixtures for loadout_retention functional tests."""

import os
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from loadout_retention.config import CleanupSettings, FeatureFlags, RetentionConfig
from loadout_retention.database import Database
from loadout_retention.model import PlayerTracking
from loadout_retention.timers import TimerHandle, TimerHost

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


class FakeTimerHost(TimerHost):
    """Records registrations; tests fire callbacks by hand."""

    def __init__(self):
        self.later = []
        self.every = []

    def call_later(self, delay_seconds, callback):
        handle = TimerHandle(lambda: None)
        self.later.append((delay_seconds, callback, handle))
        return handle

    def call_every(self, interval_seconds, callback):
        handle = TimerHandle(lambda: None)
        self.every.append((interval_seconds, callback, handle))
        return handle


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Strip LOADOUT_* env vars for test isolation."""
    for key in list(os.environ):
        if key.startswith("LOADOUT_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def memory_db():
    """Database on a single shared in-memory SQLite connection, schema created."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database = Database(engine=engine)
    database.create_schema()
    yield database
    database.dispose()


@pytest.fixture
def db_session(memory_db):
    session = sessionmaker(bind=memory_db.engine)()
    yield session
    session.close()


@pytest.fixture
def config():
    """Enabled cleanup, 30 day threshold, every category on."""
    return RetentionConfig(
        cleanup=CleanupSettings(enabled=True, inactive_days=30, run_on_startup=True,
                                interval_minutes=60, log_cleanup=True),
        features=FeatureFlags(),
    )


@pytest.fixture
def timer_host():
    return FakeTimerHost()


@pytest.fixture
def seed(memory_db):
    """Insert rows: seed(Model, steamid=..., ...)."""

    def _seed(model, **values):
        with memory_db.connect() as conn:
            conn.execute(insert(model).values(**values))
            conn.commit()

    return _seed


@pytest.fixture
def seed_player(seed):
    """Insert a tracking row last seen `days_ago` days before NOW."""

    def _seed_player(steamid, days_ago):
        seen = NOW - timedelta(days=days_ago)
        seed(PlayerTracking, steamid=steamid, first_seen=seen, last_seen=seen)

    return _seed_player
