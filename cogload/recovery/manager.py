"""Recovery session lifecycle.

State machine:

    NoSession --start()--> Active --complete()--> Completed
                           Active --cancel()----> Cancelled
                           Active --report_violation()--> Active (timer reset)

A violation restarts the completion clock (elapsed is measured from the most
recent reset, not from the start) and keeps a visible count of how often it
happened. Completion is gated on a minimum duration.

Reading the timer never mutates state. Only report_violation, complete and
cancel write, and every write goes through the session store as a single
conditional update so concurrent violations are never lost.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from loguru import logger

from cogload import constants
from cogload.core.clock import Clock, SystemClock
from cogload.errors import AlreadyActiveError, SessionNotActiveError, SessionTooShortError
from cogload.plans.types import Category, TrainingPlan
from cogload.recovery.types import RecoveryMode, RecoverySession, SessionOutcome, SessionStatus
from cogload.recovery.xp import recovery_session_xp
from cogload.utils.dates import ensure_utc

# Completion re-reads the session if a violation lands between read and write
_MAX_COMPLETE_ATTEMPTS = 3


class SessionStore(Protocol):
    """Storage contract. Must enforce at most one ACTIVE session per user."""

    def get_active_session(self, user_id: str) -> RecoverySession | None: ...

    def create_session(self, user_id: str, mode: RecoveryMode, started_at: datetime) -> RecoverySession: ...

    def record_violation(self, session_id: str, at: datetime) -> RecoverySession | None: ...

    def update_session(
        self,
        session_id: str,
        *,
        expected_violation_count: int | None = None,
        **changes: Any,
    ) -> RecoverySession | None: ...


class XPSink(Protocol):
    def append_xp(self, category: Category, amount: float, timestamp: datetime) -> None: ...


class RecoverySessionManager:
    """Owns the lifecycle of one user's timed recovery session.

    Args:
        store: Session store (enforces the unique-active constraint)
        user_id: User whose session is managed
        clock: Time source (defaults to UTC wall clock)
        minimum_duration_seconds: Minimum elapsed time for completion
        xp_store: Optional XP sink credited on completion
        plan: Optional plan supplying XP rate and walking minimum
    """

    def __init__(
        self,
        store: SessionStore,
        user_id: str,
        clock: Clock | None = None,
        minimum_duration_seconds: int = constants.MIN_RECOVERY_SESSION_SECONDS,
        xp_store: XPSink | None = None,
        plan: TrainingPlan | None = None,
    ) -> None:
        self._store = store
        self._user_id = user_id
        self._clock = clock or SystemClock()
        self._minimum_duration_seconds = minimum_duration_seconds
        self._xp_store = xp_store
        self._plan = plan

    @property
    def minimum_duration_seconds(self) -> int:
        return self._minimum_duration_seconds

    def _now(self) -> datetime:
        return ensure_utc(self._clock.now())

    def active_session(self) -> RecoverySession | None:
        return self._store.get_active_session(self._user_id)

    def _require_active(self) -> RecoverySession:
        session = self.active_session()
        if session is None:
            raise SessionNotActiveError(f"No active recovery session for user {self._user_id}")
        return session

    def start(self, mode: RecoveryMode = RecoveryMode.DETOX) -> RecoverySession:
        """Start a new session.

        Raises:
            AlreadyActiveError: If the user already has an active session.
                Starting never silently replaces the active one.
        """
        existing = self.active_session()
        if existing is not None:
            logger.warning("Recovery session already active", user_id=self._user_id, session_id=existing.id)
            raise AlreadyActiveError(existing.id)

        session = self._store.create_session(self._user_id, RecoveryMode(mode), self._now())
        logger.info("Recovery session started", user_id=self._user_id, session_id=session.id, mode=session.mode.value)
        return session

    def report_violation(self) -> RecoverySession:
        """Record that the user left the guarded context.

        Increments violation_count atomically and resets the completion clock
        to now (last writer wins on timer_reset_at).
        """
        session = self._require_active()
        at = max(self._now(), ensure_utc(session.started_at))

        updated = self._store.record_violation(session.id, at)
        if updated is None:
            raise SessionNotActiveError(f"Recovery session {session.id} is no longer active")

        logger.info(
            "Recovery session violation, timer reset",
            user_id=self._user_id,
            session_id=updated.id,
            violation_count=updated.violation_count,
        )
        return updated

    def elapsed_seconds(self, session: RecoverySession | None = None) -> float:
        """Seconds counted toward completion: now - (timer_reset_at or started_at).

        Idempotent under polling; returns 0.0 when there is no active session.
        """
        current = session or self.active_session()
        if current is None:
            return 0.0
        elapsed = (self._now() - ensure_utc(current.effective_start)).total_seconds()
        return max(0.0, elapsed)

    def remaining_seconds(self) -> float:
        session = self.active_session()
        if session is None:
            return float(self._minimum_duration_seconds)
        return max(0.0, self._minimum_duration_seconds - self.elapsed_seconds(session))

    def can_complete(self) -> bool:
        session = self.active_session()
        return session is not None and self.elapsed_seconds(session) >= self._minimum_duration_seconds

    def complete(self, walking_minutes: int = 0) -> SessionOutcome:
        """Complete the active session.

        The recorded duration is the elapsed time since the last reset at
        the moment of completion, not wall-clock time since start.

        Raises:
            SessionNotActiveError: If there is no active session
            SessionTooShortError: If elapsed < minimum_duration_seconds
        """
        for _ in range(_MAX_COMPLETE_ATTEMPTS):
            session = self._require_active()
            now = self._now()
            elapsed = max(0.0, (now - ensure_utc(session.effective_start)).total_seconds())

            if elapsed < self._minimum_duration_seconds:
                logger.warning(
                    "Recovery session too short to complete",
                    user_id=self._user_id,
                    session_id=session.id,
                    elapsed_seconds=int(elapsed),
                    minimum_seconds=self._minimum_duration_seconds,
                )
                raise SessionTooShortError(elapsed, self._minimum_duration_seconds)

            xp = self._session_xp(elapsed, session.mode, walking_minutes)
            updated = self._store.update_session(
                session.id,
                expected_violation_count=session.violation_count,
                status=SessionStatus.COMPLETED,
                ended_at=now,
                duration_seconds=elapsed,
                xp_earned=xp,
                walking_minutes=walking_minutes,
            )
            if updated is None:
                # A violation or another writer got in first; re-evaluate
                logger.debug("Recovery session changed during completion, retrying", session_id=session.id)
                continue

            if self._xp_store is not None and xp > 0:
                self._xp_store.append_xp(Category.RECOVERY, xp, now)

            logger.info(
                "Recovery session completed",
                user_id=self._user_id,
                session_id=updated.id,
                duration_seconds=int(elapsed),
                violation_count=updated.violation_count,
                xp_earned=xp,
            )
            return SessionOutcome(session=updated, duration_seconds=elapsed, xp_earned=xp)

        raise SessionNotActiveError("Recovery session kept changing during completion")

    def cancel(self) -> RecoverySession:
        """Cancel the active session. Accumulated XP is discarded."""
        session = self._require_active()
        updated = self._store.update_session(
            session.id,
            status=SessionStatus.CANCELLED,
            ended_at=self._now(),
            xp_earned=0.0,
        )
        if updated is None:
            raise SessionNotActiveError(f"Recovery session {session.id} is no longer active")

        logger.info("Recovery session cancelled", user_id=self._user_id, session_id=updated.id)
        return updated

    def _session_xp(self, duration_seconds: float, mode: RecoveryMode, walking_minutes: int) -> float:
        if self._plan is None:
            return recovery_session_xp(duration_seconds, mode, walking_minutes)
        return recovery_session_xp(
            duration_seconds,
            mode,
            walking_minutes,
            xp_per_minute=self._plan.recovery.xp_per_minute,
            min_walking_minutes=self._plan.recovery.walking_min_minutes,
        )
