"""Repository layer - data access abstractions and implementations."""

from portfolio_analyzer.repositories.protocols import (
    PortfolioCacheRepository,
    TransactionCacheRepository,
)

__all__ = [
    "PortfolioCacheRepository",
    "TransactionCacheRepository",
]
