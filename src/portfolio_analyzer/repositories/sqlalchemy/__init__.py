"""SQLAlchemy repository implementations."""

from portfolio_analyzer.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_db,
    get_session,
    init_db,
    init_db_with_path,
    reset_database,
    Base,
)
from portfolio_analyzer.repositories.sqlalchemy.cache_repo import (
    SqlAlchemyPortfolioCacheRepository,
    SqlAlchemyTransactionCacheRepository,
)

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "get_session",
    "init_db",
    "init_db_with_path",
    "reset_database",
    "Base",
    "SqlAlchemyPortfolioCacheRepository",
    "SqlAlchemyTransactionCacheRepository",
]
