"""
Pytest configuration and fixtures for the portfolio analyzer tests.

This module provides:
- In-memory SQLite database fixtures
- Factory helpers for buy/sell transactions
- Deterministic and failing price providers
- Time helpers for Asia/Tokyo timezone
- Service and repository fixtures
"""

import os
import tempfile
from datetime import datetime
from decimal import Decimal
from typing import Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from portfolio_analyzer.main import app
from portfolio_analyzer.repositories.sqlalchemy.database import Base, get_db
# Import ORM models to register them with Base before creating tables
from portfolio_analyzer.repositories.sqlalchemy import orm_models  # noqa: F401
from portfolio_analyzer.repositories.sqlalchemy import (
    SqlAlchemyPortfolioCacheRepository,
    SqlAlchemyTransactionCacheRepository,
)
from portfolio_analyzer.api.deps import get_price_service
from portfolio_analyzer.services import PriceService, PortfolioDataService
from portfolio_analyzer.csv import CsvImporter
from portfolio_analyzer.domain.models import Transaction, TradeKind, Exchange
from portfolio_analyzer.domain.views import PriceQuote
from portfolio_analyzer.core.timezone import JST_TZ
from portfolio_analyzer.config.settings import reset_settings


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def jst_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in Asia/Tokyo timezone."""
    return JST_TZ.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return jst_datetime(2024, 6, 15, 14, 30, 0)


# =============================================================================
# TRANSACTION HELPERS
# =============================================================================


def buy(
    symbol: str,
    quantity: str,
    rate: str,
    amount: Optional[str] = None,
    fee: str = "0",
    traded_at: Optional[datetime] = None,
    exchange: Optional[Exchange] = Exchange.GMO,
) -> Transaction:
    """Build a BUY trade; amount defaults to quantity * rate."""
    qty = Decimal(quantity)
    px = Decimal(rate)
    return Transaction(
        asset_symbol=symbol,
        kind=TradeKind.BUY,
        quantity=qty,
        rate=px,
        amount=Decimal(amount) if amount is not None else qty * px,
        fee=Decimal(fee),
        traded_at=traded_at,
        exchange=exchange,
    )


def sell(
    symbol: str,
    quantity: str,
    amount: str,
    rate: str = "0",
    fee: str = "0",
    traded_at: Optional[datetime] = None,
    exchange: Optional[Exchange] = Exchange.GMO,
) -> Transaction:
    """Build a SELL trade; rate does not affect realized profit."""
    return Transaction(
        asset_symbol=symbol,
        kind=TradeKind.SELL,
        quantity=Decimal(quantity),
        rate=Decimal(rate),
        amount=Decimal(amount),
        fee=Decimal(fee),
        traded_at=traded_at,
        exchange=exchange,
    )


def quotes(**prices: str) -> dict[str, PriceQuote]:
    """Build a price map: quotes(BTC="100", ETH="5")."""
    return {
        symbol: PriceQuote(symbol=symbol, unit_price=Decimal(price))
        for symbol, price in prices.items()
    }


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.0001"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def portfolio_repo(test_session) -> SqlAlchemyPortfolioCacheRepository:
    """Provide test PortfolioCacheRepository."""
    return SqlAlchemyPortfolioCacheRepository(test_session)


@pytest.fixture
def transaction_repo(test_session) -> SqlAlchemyTransactionCacheRepository:
    """Provide test TransactionCacheRepository."""
    return SqlAlchemyTransactionCacheRepository(test_session)


# =============================================================================
# PRICE FIXTURES
# =============================================================================


class DeterministicPriceProvider:
    """
    Deterministic price provider for testing.

    Counts calls so tests can assert on caching.
    """

    FIXED_PRICES = {
        "BTC": Decimal("5000000"),
        "ETH": Decimal("300000"),
        "XRP": Decimal("80"),
    }

    def __init__(self, as_of: Optional[datetime] = None):
        self._as_of = as_of or jst_datetime(2024, 6, 15, 16, 0, 0)
        self.calls: list[list[str]] = []

    def get_prices(self, symbols: list[str]) -> dict[str, PriceQuote]:
        """Return deterministic prices for requested symbols."""
        self.calls.append(list(symbols))
        result = {}
        for symbol in symbols:
            upper_symbol = symbol.upper()
            if upper_symbol in self.FIXED_PRICES:
                result[upper_symbol] = PriceQuote(
                    symbol=upper_symbol,
                    unit_price=self.FIXED_PRICES[upper_symbol],
                    as_of=self._as_of,
                )
        return result


class FailingPriceProvider:
    """Price provider that always raises an exception."""

    def get_prices(self, symbols: list[str]) -> dict[str, PriceQuote]:
        raise ConnectionError("Network unavailable")


@pytest.fixture
def deterministic_provider(fixed_now) -> DeterministicPriceProvider:
    """Provide deterministic price provider."""
    return DeterministicPriceProvider(as_of=fixed_now)


@pytest.fixture
def failing_provider() -> FailingPriceProvider:
    """Provide a price provider that always fails."""
    return FailingPriceProvider()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def price_service(deterministic_provider) -> PriceService:
    """Provide test PriceService with deterministic provider."""
    return PriceService(
        provider=deterministic_provider,
        cache_ttl_seconds=1800,
    )


@pytest.fixture
def portfolio_service(portfolio_repo, transaction_repo, price_service) -> PortfolioDataService:
    """Provide test PortfolioDataService."""
    return PortfolioDataService(
        portfolio_repo=portfolio_repo,
        transaction_repo=transaction_repo,
        price_service=price_service,
    )


@pytest.fixture
def csv_importer(portfolio_service) -> CsvImporter:
    """Provide test CsvImporter."""
    return CsvImporter(portfolio_service=portfolio_service)


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_engine, price_service) -> TestClient:
    """Provide FastAPI test client with test database and deterministic prices."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_price_service] = lambda: price_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# =============================================================================
# CSV FIXTURES
# =============================================================================


@pytest.fixture
def temp_csv_file():
    """Provide a temporary CSV file path that is cleaned up after test."""
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".csv",
        delete=False,
        encoding="utf-8",
    ) as f:
        tmp_path = f.name

    yield tmp_path

    if os.path.exists(tmp_path):
        os.unlink(tmp_path)


@pytest.fixture
def gmo_csv_content() -> str:
    """GMO Coin trade history: two BTC buys, one BTC sell, one ETH buy, plus noise rows."""
    return """日時,精算区分,銘柄名,売買区分,約定数量,約定レート,日本円受渡金額,注文手数料
2024-01-10 09:00:00,取引所現物取引,BTC,買,0.02,"6,000,000","120,000",0
2024-02-05 12:30:00,取引所現物取引,BTC,買,0.01,"9,000,000","90,000",0
2024-03-01 15:00:00,取引所現物取引,ETH,買,1,"400,000","400,000",0
2024-03-20 10:15:00,取引所現物取引,BTC,売,0.01,"10,000,000","100,000",12
2024-03-21 10:15:00,入金,JPY,,,,"500,000",0
2024-03-22 10:15:00,取引所現物取引,JPY,買,1,1,1,0
"""


@pytest.fixture
def okj_csv_content() -> str:
    """OKCoin Japan order history: one filled XRP buy, one cancelled order, one sell."""
    return """注文日時,取引銘柄,売買,ステータス,約定数量,平均約定価格,約定代金
2024-04-01 08:00:00,XRP/JPY,購入,全部約定,"1,000",75,"75,000"
2024-04-02 08:00:00,XRP/JPY,購入,キャンセル,500,76,0
2024-04-03 08:00:00,XRP/JPY,売却,全部約定,200,90,"18,000"
"""
