"""Repository protocol definitions (interfaces)."""

from portfolio_analyzer.repositories.protocols.cache_repo import (
    PortfolioCacheRepository,
    TransactionCacheRepository,
)

__all__ = [
    "PortfolioCacheRepository",
    "TransactionCacheRepository",
]
