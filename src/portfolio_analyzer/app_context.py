"""In-process access to the analyzer services, without going through HTTP.

Meant for scripts and notebooks working against a local data directory::

    with AppContext(data_dir=Path("~/crypto").expanduser()) as ctx:
        ctx.csv_importer.import_csv(["gmo_2024.csv"])
        portfolio = ctx.portfolio.refresh_prices()
"""

from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from portfolio_analyzer.config.settings import DB_FILE_NAME, Settings, set_settings, get_settings
from portfolio_analyzer.repositories.sqlalchemy.database import (
    init_db_with_path,
    reset_database,
    get_session,
)
from portfolio_analyzer.repositories.sqlalchemy import (
    SqlAlchemyPortfolioCacheRepository,
    SqlAlchemyTransactionCacheRepository,
)
from portfolio_analyzer.providers.price_provider import PriceProvider
from portfolio_analyzer.providers.stub_provider import StubPriceProvider
from portfolio_analyzer.services import PriceService, PortfolioDataService
from portfolio_analyzer.csv import CsvImporter


class AppContext:
    """
    Owns one database session and builds the services on first access.

    ``price_provider`` defaults to the offline stub.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        price_provider: Optional[PriceProvider] = None,
    ):
        self._data_dir = data_dir
        self._price_provider = price_provider
        self._session: Optional[Session] = None
        self._initialized = False

        self._price_service: Optional[PriceService] = None
        self._portfolio_service: Optional[PortfolioDataService] = None
        self._csv_importer: Optional[CsvImporter] = None

    def initialize(self, data_dir: Optional[Path] = None) -> None:
        """Point settings and the SQLite store at ``data_dir`` and drop cached services."""
        if data_dir:
            self._data_dir = data_dir

        self.close()
        settings = Settings(data_dir=self._data_dir)
        set_settings(settings)
        reset_database()
        init_db_with_path(settings.get_data_dir() / DB_FILE_NAME)

        self._price_service = None
        self._portfolio_service = None
        self._csv_importer = None
        self._initialized = True

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def data_dir(self) -> Path:
        return get_settings().get_data_dir()

    @property
    def session(self) -> Session:
        if self._session is None:
            self._session = get_session()
        return self._session

    @property
    def prices(self) -> PriceService:
        if self._price_service is None:
            self._price_service = PriceService(
                provider=self._price_provider or StubPriceProvider(),
                cache_ttl_seconds=get_settings().price_cache_ttl_seconds,
            )
        return self._price_service

    @property
    def portfolio(self) -> PortfolioDataService:
        if self._portfolio_service is None:
            self._portfolio_service = PortfolioDataService(
                portfolio_repo=SqlAlchemyPortfolioCacheRepository(self.session),
                transaction_repo=SqlAlchemyTransactionCacheRepository(self.session),
                price_service=self.prices,
            )
        return self._portfolio_service

    @property
    def csv_importer(self) -> CsvImporter:
        if self._csv_importer is None:
            self._csv_importer = CsvImporter(portfolio_service=self.portfolio)
        return self._csv_importer

    def close(self) -> None:
        """Close the database session; services built on it must not be reused."""
        if self._session is not None:
            self._session.close()
            self._session = None
        self._portfolio_service = None
        self._csv_importer = None

    def __enter__(self) -> "AppContext":
        if not self._initialized:
            self.initialize()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
