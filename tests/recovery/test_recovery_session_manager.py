"""Tests for the recovery session lifecycle."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from cogload.db.models import Base
from cogload.errors import AlreadyActiveError, SessionNotActiveError, SessionTooShortError
from cogload.plans.types import Category
from cogload.recovery.manager import RecoverySessionManager
from cogload.recovery.types import RecoveryMode, SessionStatus
from cogload.stores.session_store import SqlSessionStore
from cogload.stores.xp_store import SqlXPStore

USER = "user-1"


@pytest.fixture
def xp_store(session_factory):
    return SqlXPStore(session_factory, USER)


@pytest.fixture
def manager(session_factory, clock, xp_store):
    return RecoverySessionManager(SqlSessionStore(session_factory), USER, clock=clock, xp_store=xp_store)


# ============================================================================
# start
# ============================================================================


def test_start_creates_active_session(manager, clock):
    session = manager.start(RecoveryMode.DETOX)

    assert session.status == SessionStatus.ACTIVE
    assert session.violation_count == 0
    assert session.timer_reset_at is None
    assert session.started_at == clock.now()
    assert manager.active_session() == session


def test_start_while_active_raises(manager):
    """Starting never silently replaces the active session."""
    first = manager.start()

    with pytest.raises(AlreadyActiveError) as exc_info:
        manager.start()

    assert exc_info.value.session_id == first.id
    assert manager.active_session().id == first.id


def test_store_rejects_second_active_session(session_factory, clock):
    """The unique-active index holds even when the manager check is bypassed."""
    store = SqlSessionStore(session_factory)
    first = store.create_session(USER, RecoveryMode.DETOX, clock.now())

    with pytest.raises(AlreadyActiveError) as exc_info:
        store.create_session(USER, RecoveryMode.WALK, clock.now())

    assert exc_info.value.session_id == first.id


def test_other_users_are_independent(session_factory, clock):
    store = SqlSessionStore(session_factory)
    RecoverySessionManager(store, "user-a", clock=clock).start()

    session = RecoverySessionManager(store, "user-b", clock=clock).start()

    assert session.user_id == "user-b"


# ============================================================================
# Minimum duration
# ============================================================================


def test_complete_before_minimum_fails_then_succeeds(manager, clock):
    manager.start()

    clock.advance(seconds=1700)
    with pytest.raises(SessionTooShortError, match="1700s elapsed") as exc_info:
        manager.complete()
    assert exc_info.value.remaining_seconds == 100

    clock.advance(seconds=101)
    outcome = manager.complete()

    assert outcome.session.status == SessionStatus.COMPLETED
    assert outcome.duration_seconds == 1801
    assert manager.active_session() is None


def test_violation_resets_completion_clock(manager, clock):
    """Violation at 500s; 2299s -> 1799s elapsed fails, 2301s -> 1801s succeeds."""
    manager.start()

    clock.advance(seconds=500)
    session = manager.report_violation()
    assert session.violation_count == 1
    assert session.timer_reset_at == clock.now()

    clock.advance(seconds=1799)
    with pytest.raises(SessionTooShortError):
        manager.complete()

    clock.advance(seconds=2)
    outcome = manager.complete()

    assert outcome.duration_seconds == 1801
    assert outcome.session.violation_count == 1


def test_violations_are_counted(manager, clock):
    manager.start()

    for _ in range(3):
        clock.advance(seconds=10)
        manager.report_violation()

    assert manager.active_session().violation_count == 3


def test_elapsed_is_idempotent_under_polling(manager, clock):
    """Reading the timer never mutates the session."""
    started = manager.start()
    clock.advance(seconds=600)

    first = manager.elapsed_seconds()
    second = manager.elapsed_seconds()

    assert first == second == 600
    assert manager.remaining_seconds() == 1200
    assert manager.can_complete() is False
    assert manager.active_session() == started


def test_elapsed_without_session(manager):
    assert manager.elapsed_seconds() == 0
    assert manager.can_complete() is False


# ============================================================================
# XP and cancel
# ============================================================================


def test_completion_credits_recovery_xp(manager, clock, xp_store):
    """Detox without a walk earns half rate: 30 min * 0.05 * 0.5."""
    manager.start(RecoveryMode.DETOX)
    clock.advance(seconds=1801)

    outcome = manager.complete()

    assert outcome.xp_earned == 0.75
    assert xp_store.sum_xp(Category.RECOVERY, clock.now()) == 0.75


def test_walk_session_earns_full_rate(manager, clock, xp_store):
    manager.start(RecoveryMode.WALK)
    clock.advance(minutes=60)

    outcome = manager.complete()

    assert outcome.xp_earned == 3.0
    assert xp_store.sum_xp(Category.RECOVERY, clock.now()) == 3.0


def test_cancel_discards_xp(manager, clock, xp_store):
    manager.start()
    clock.advance(minutes=45)

    cancelled = manager.cancel()

    assert cancelled.status == SessionStatus.CANCELLED
    assert cancelled.xp_earned == 0
    assert xp_store.sum_xp(Category.RECOVERY, clock.now()) == 0
    assert manager.start().status == SessionStatus.ACTIVE


# ============================================================================
# No active session
# ============================================================================


@pytest.mark.parametrize("action", ["report_violation", "complete", "cancel"])
def test_actions_without_active_session(manager, action):
    with pytest.raises(SessionNotActiveError):
        getattr(manager, action)()


def test_finished_session_ignores_late_violation(session_factory, clock):
    store = SqlSessionStore(session_factory)
    session = store.create_session(USER, RecoveryMode.DETOX, clock.now())
    store.update_session(session.id, status=SessionStatus.CANCELLED)

    assert store.record_violation(session.id, clock.now()) is None


def test_stale_completion_is_rejected_by_store(session_factory, clock):
    """A completion computed before a violation must not overwrite it."""
    store = SqlSessionStore(session_factory)
    session = store.create_session(USER, RecoveryMode.DETOX, clock.now())
    store.record_violation(session.id, clock.now())

    result = store.update_session(
        session.id,
        expected_violation_count=0,
        status=SessionStatus.COMPLETED,
    )

    assert result is None
    assert store.get_active_session(USER).violation_count == 1


def test_concurrent_violations_are_not_lost(tmp_path, clock):
    """Every violation reported from parallel threads is counted."""
    engine = create_engine(f"sqlite:///{tmp_path / 'sessions.db'}", connect_args={"check_same_thread": False, "timeout": 30})
    Base.metadata.create_all(bind=engine)
    store = SqlSessionStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    manager = RecoverySessionManager(store, USER, clock=clock)
    manager.start()
    clock.advance(seconds=60)

    def report_many(_: int) -> None:
        for _ in range(10):
            manager.report_violation()

    try:
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(report_many, range(8)))

        assert manager.active_session().violation_count == 80
    finally:
        engine.dispose()
