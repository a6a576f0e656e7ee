"""Dependency injection for FastAPI."""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from portfolio_analyzer.repositories.sqlalchemy.database import get_db
from portfolio_analyzer.repositories.sqlalchemy import (
    SqlAlchemyPortfolioCacheRepository,
    SqlAlchemyTransactionCacheRepository,
)
from portfolio_analyzer.providers.stub_provider import StubPriceProvider
from portfolio_analyzer.services import PriceService, PortfolioDataService
from portfolio_analyzer.csv import CsvImporter
from portfolio_analyzer.config.settings import get_settings


def get_portfolio_repo(db: Session = Depends(get_db)) -> SqlAlchemyPortfolioCacheRepository:
    """Provide PortfolioCacheRepository instance."""
    return SqlAlchemyPortfolioCacheRepository(db)


def get_transaction_repo(db: Session = Depends(get_db)) -> SqlAlchemyTransactionCacheRepository:
    """Provide TransactionCacheRepository instance."""
    return SqlAlchemyTransactionCacheRepository(db)


@lru_cache
def get_price_service() -> PriceService:
    """Provide the process-wide PriceService (its cache outlives a request)."""
    settings = get_settings()
    return PriceService(
        provider=StubPriceProvider(),
        cache_ttl_seconds=settings.price_cache_ttl_seconds,
    )


def get_portfolio_service(
    portfolio_repo: SqlAlchemyPortfolioCacheRepository = Depends(get_portfolio_repo),
    transaction_repo: SqlAlchemyTransactionCacheRepository = Depends(get_transaction_repo),
    price_service: PriceService = Depends(get_price_service),
) -> PortfolioDataService:
    """Provide PortfolioDataService instance."""
    return PortfolioDataService(
        portfolio_repo=portfolio_repo,
        transaction_repo=transaction_repo,
        price_service=price_service,
    )


def get_csv_importer(
    portfolio_service: PortfolioDataService = Depends(get_portfolio_service),
) -> CsvImporter:
    """Provide CsvImporter instance."""
    return CsvImporter(portfolio_service=portfolio_service)
