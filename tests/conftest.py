"""Root conftest for all tests.

Shared fixtures: a fixed clock pinned to a Monday, an in-memory SQLite
database with every table created, and ready-made snapshots.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cogload.core.clock import FixedClock
from cogload.db.models import Base
from cogload.plans.catalog import get_training_plan
from cogload.state.snapshot import CognitiveSnapshot

# Monday of ISO week 2026-W43
MONDAY = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to Monday 09:00 UTC."""
    return FixedClock(MONDAY)


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across connections."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory bound to the in-memory engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def expert_plan():
    return get_training_plan("expert")


@pytest.fixture
def healthy_snapshot() -> CognitiveSnapshot:
    """Snapshot that passes every base threshold."""
    return CognitiveSnapshot.from_metrics(recovery_buffer=80, sharpness=80, readiness=80)
