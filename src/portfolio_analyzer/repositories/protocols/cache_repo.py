"""Cache repository protocols for the stored portfolio and trade history."""

from typing import Protocol, Optional

from portfolio_analyzer.domain.models import Transaction
from portfolio_analyzer.domain.views import PortfolioData


class PortfolioCacheRepository(Protocol):
    """Interface for the last computed portfolio value."""

    def get(self) -> Optional[PortfolioData]:
        """Get the stored portfolio, or None if nothing has been stored."""
        ...

    def set(self, data: PortfolioData) -> None:
        """Replace the stored portfolio."""
        ...

    def clear(self) -> None:
        """Remove the stored portfolio."""
        ...


class TransactionCacheRepository(Protocol):
    """Interface for the imported raw trade history."""

    def list_all(self) -> list[Transaction]:
        """Get all stored trades in import order."""
        ...

    def replace_all(self, transactions: list[Transaction]) -> None:
        """Replace the stored trade history."""
        ...

    def clear(self) -> None:
        """Remove all stored trades."""
        ...
