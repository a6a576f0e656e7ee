"""SQLite engine and session handling for the portfolio store."""

from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from portfolio_analyzer.config.settings import get_settings

Base = declarative_base()

# Reconfigured by init_db_with_path / reset_database
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _configure(url: str) -> Engine:
    global _engine, _SessionLocal
    _engine = create_engine(
        url,
        connect_args={"check_same_thread": False},  # sessions cross FastAPI worker threads
        echo=False,
    )
    _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _engine


def get_engine() -> Engine:
    """Engine for the configured database, created on first use."""
    if _engine is None:
        return _configure(get_settings().get_database_url())
    return _engine


def get_session_factory() -> sessionmaker:
    if _SessionLocal is None:
        get_engine()
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding one session per request."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def get_session() -> Session:
    """Session for in-process callers; the caller closes it."""
    return get_session_factory()()


def init_db() -> None:
    """Create the cache table in the configured database."""
    from portfolio_analyzer.repositories.sqlalchemy import orm_models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def init_db_with_path(db_path: Path) -> None:
    """Point the store at a SQLite file and create the cache table there."""
    _configure(f"sqlite:///{db_path}")
    init_db()


def reset_database() -> None:
    """Dispose the engine so the next call reconfigures from settings."""
    global _engine, _SessionLocal

    if _engine is not None:
        _engine.dispose()

    _engine = None
    _SessionLocal = None
