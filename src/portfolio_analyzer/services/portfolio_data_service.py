"""Portfolio data service: keeps the stored portfolio in step with imports and prices."""

import logging
from typing import Iterable, Mapping, Optional

from portfolio_analyzer.domain.models import Transaction, SortField, SortDirection
from portfolio_analyzer.domain.views import (
    AssetSummary,
    PortfolioData,
    PriceQuote,
    ImportSummary,
)
from portfolio_analyzer.repositories.protocols import (
    PortfolioCacheRepository,
    TransactionCacheRepository,
)
from portfolio_analyzer.services import transaction_utils
from portfolio_analyzer.services.portfolio_engine import (
    analyze,
    apply_prices,
    strip_prices,
    sort_summary,
)
from portfolio_analyzer.services.price_service import PriceService

logger = logging.getLogger(__name__)


class PortfolioDataService:
    """
    Service coordinating the accounting engine with the cache stores.

    Two update paths:
    - new trades: merge into the stored history, recompute from scratch with
      ``analyze`` and store the result without any price fields
    - price refresh: overlay prices onto the stored value and store the priced
      snapshot so the last view survives a reload; the next import discards it
    """

    def __init__(
        self,
        portfolio_repo: PortfolioCacheRepository,
        transaction_repo: TransactionCacheRepository,
        price_service: PriceService,
    ):
        self._portfolio_repo = portfolio_repo
        self._transaction_repo = transaction_repo
        self._prices = price_service

    def import_transactions(
        self,
        incoming: Iterable[Transaction],
        file_names: Iterable[str] = (),
    ) -> tuple[PortfolioData, ImportSummary]:
        """
        Merge new trades into the stored history and recompute the portfolio.

        Duplicates of already-stored trades are skipped.
        """
        incoming = list(incoming)
        existing = self._transaction_repo.list_all()
        merged = transaction_utils.merge(existing, incoming)

        portfolio = analyze(merged.transactions)

        self._transaction_repo.replace_all(merged.transactions)
        self.update_data(portfolio)

        summary = ImportSummary(
            parsed_count=len(incoming),
            added_count=merged.added_count,
            duplicate_count=merged.duplicate_count,
            file_names=list(file_names),
        )
        logger.info(
            "Imported %d of %d transactions (%d assets)",
            summary.added_count,
            summary.parsed_count,
            portfolio.stats.asset_count,
        )
        return portfolio, summary

    def update_data(self, portfolio_data: PortfolioData) -> None:
        """Store a freshly analyzed portfolio. Price fields are never persisted here."""
        self._portfolio_repo.set(strip_prices(portfolio_data))

    def get_data(self) -> Optional[PortfolioData]:
        return self._portfolio_repo.get()

    def get_transactions(self, asset_symbol: Optional[str] = None) -> list[Transaction]:
        """Stored trades in import order, optionally for one asset."""
        transactions = self._transaction_repo.list_all()
        if asset_symbol:
            transactions = transaction_utils.filter_by_asset(transactions, asset_symbol.upper())
        return transactions

    def update_with_prices(self, prices: Mapping[str, PriceQuote]) -> Optional[PortfolioData]:
        """
        Overlay prices onto the stored portfolio and store the priced snapshot.

        Returns None when no portfolio has been stored yet.
        """
        portfolio = self._portfolio_repo.get()
        if portfolio is None or portfolio.summary is None:
            return None

        priced = apply_prices(portfolio, prices)
        self._portfolio_repo.set(priced)
        return priced

    def refresh_prices(self) -> Optional[PortfolioData]:
        """Fetch current prices for every stored asset and apply them."""
        portfolio = self._portfolio_repo.get()
        if portfolio is None or not portfolio.summary:
            return portfolio

        prices = self._prices.get_prices(portfolio.symbols)
        missing = [s for s in portfolio.symbols if s.upper() not in prices]
        if missing:
            logger.info("No price available for: %s", ", ".join(missing))

        return self.update_with_prices(prices)

    def rebuild(self) -> PortfolioData:
        """Recompute the portfolio from the stored trade history."""
        portfolio = analyze(self._transaction_repo.list_all())
        self.update_data(portfolio)
        return portfolio

    def sorted_summary(
        self,
        field: SortField = SortField.REALIZED_PROFIT,
        direction: SortDirection = SortDirection.DESC,
    ) -> list[AssetSummary]:
        portfolio = self._portfolio_repo.get()
        if portfolio is None:
            return []
        return sort_summary(portfolio.summary, field, direction)

    def reset(self) -> None:
        """Forget all imported trades and the stored portfolio."""
        self._portfolio_repo.clear()
        self._transaction_repo.clear()
        logger.info("Portfolio data cleared")
