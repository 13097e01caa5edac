"""SQLAlchemy implementations of the engine's storage collaborators."""

from cogload.stores.override_store import SqlOverrideStore
from cogload.stores.session_store import SqlSessionStore
from cogload.stores.week_flag_store import SqlWeekFlagBackend
from cogload.stores.xp_store import SqlXPStore

__all__ = ["SqlOverrideStore", "SqlSessionStore", "SqlWeekFlagBackend", "SqlXPStore"]
