"""Error types for the cognitive-load engine.

Session-lifecycle and override errors are expected, user-facing conditions.
They carry enough context for the caller to render a disabled action with a
reason, and should not be logged as failures.
"""

from __future__ import annotations


class CognitiveLoadError(RuntimeError):
    """Base exception for engine errors."""


class SessionError(CognitiveLoadError):
    """Base exception for recovery session lifecycle errors."""


class AlreadyActiveError(SessionError):
    """Raised when starting a session while another one is active.

    Attributes:
        session_id: ID of the session that is already active (if known)
    """

    def __init__(self, session_id: str | None = None) -> None:
        self.session_id = session_id
        message = "A recovery session is already active"
        if session_id:
            message = f"{message} (session_id={session_id})"
        super().__init__(message)


class SessionTooShortError(SessionError):
    """Raised when completing a session before the minimum duration.

    Recoverable: the user must keep the session running and try again.

    Attributes:
        elapsed_seconds: Seconds counted since start or last violation reset
        minimum_seconds: Minimum required duration
    """

    def __init__(self, elapsed_seconds: float, minimum_seconds: int) -> None:
        self.elapsed_seconds = elapsed_seconds
        self.minimum_seconds = minimum_seconds
        super().__init__(
            f"Session too short: {int(elapsed_seconds)}s elapsed, minimum is {minimum_seconds}s"
        )

    @property
    def remaining_seconds(self) -> float:
        return max(0.0, self.minimum_seconds - self.elapsed_seconds)


class SessionNotActiveError(SessionError):
    """Raised when a lifecycle action needs an active session and there is none."""


class OverrideLimitError(CognitiveLoadError):
    """Raised when an override is not allowed.

    Attributes:
        reason: User-facing explanation
        reason_code: Stable machine-readable code
    """

    def __init__(self, reason: str, reason_code: str) -> None:
        self.reason = reason
        self.reason_code = reason_code
        super().__init__(reason)


class InvalidSnapshotError(CognitiveLoadError, ValueError):
    """Raised when the cognitive-state snapshot is missing or malformed.

    Fatal for the evaluation: callers must not proceed with a guessed snapshot.
    """


class UnknownPlanError(CognitiveLoadError, KeyError):
    """Raised when a training plan identifier is not in the catalogue."""

    def __init__(self, plan_id: str) -> None:
        self.plan_id = plan_id
        super().__init__(f"Unknown training plan: {plan_id}")

    def __str__(self) -> str:
        return f"Unknown training plan: {self.plan_id}"
