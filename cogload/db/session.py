from __future__ import annotations

from collections.abc import Callable, Generator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from cogload.config.settings import settings
from cogload.db.models import Base

SessionFactory = Callable[[], Session]

# Lazy initialization to avoid import-time database connections
_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def _get_engine() -> Engine:
    """Get or create the database engine (lazy initialization)."""
    global _engine
    if _engine is None:
        logger.info("Initializing database engine", database_url=settings.database_url)
        connect_args = {}
        if "sqlite" in settings.database_url.lower():
            connect_args = {"check_same_thread": False}
        _engine = create_engine(
            settings.database_url,
            connect_args=connect_args,
            echo=False,
            pool_pre_ping=True,
        )
        logger.info("Database engine initialized")
    return _engine


def get_engine() -> Engine:
    return _get_engine()


def get_session_factory() -> sessionmaker[Session]:
    """Get or create the session factory (lazy initialization)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
        logger.info("Database session factory initialized")
    return _SessionLocal


def init_db(engine: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""
    target = engine or _get_engine()
    Base.metadata.create_all(bind=target)
    logger.info("Database tables ensured", tables=sorted(Base.metadata.tables))


@contextmanager
def session_scope(factory: SessionFactory) -> Generator[Session, None, None]:
    """Open a session from factory, commit on success, roll back on error."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        logger.debug("Rolling back database session")
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Session from the default factory bound to settings.database_url."""
    with session_scope(get_session_factory()) as session:
        yield session
