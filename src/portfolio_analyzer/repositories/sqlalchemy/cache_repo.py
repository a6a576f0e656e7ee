"""SQLAlchemy implementations of the cache repositories."""

from typing import Optional

from pydantic import TypeAdapter
from sqlalchemy.orm import Session

from portfolio_analyzer.core.timezone import now_jst
from portfolio_analyzer.domain.models import Transaction
from portfolio_analyzer.domain.views import PortfolioData
from portfolio_analyzer.repositories.sqlalchemy.orm_models import CacheEntryORM

PORTFOLIO_DATA_KEY = "portfolio_data"
RAW_TRANSACTIONS_KEY = "raw_transactions"

_portfolio_adapter = TypeAdapter(PortfolioData)
_transactions_adapter = TypeAdapter(list[Transaction])


class _SqlAlchemyKeyValueStore:
    """Reads and writes JSON payloads in the cache_entries table."""

    def __init__(self, db: Session):
        self._db = db

    def _get_payload(self, key: str) -> Optional[str]:
        entry = self._db.get(CacheEntryORM, key)
        return entry.payload if entry else None

    def _put_payload(self, key: str, payload: str) -> None:
        entry = self._db.get(CacheEntryORM, key)
        if entry:
            entry.payload = payload
            entry.updated_at = now_jst()
        else:
            entry = CacheEntryORM(key=key, payload=payload, updated_at=now_jst())
            self._db.add(entry)
        self._db.commit()

    def _delete(self, key: str) -> None:
        self._db.query(CacheEntryORM).filter(CacheEntryORM.key == key).delete()
        self._db.commit()


class SqlAlchemyPortfolioCacheRepository(_SqlAlchemyKeyValueStore):
    """SQLAlchemy-backed store for the last computed portfolio."""

    def get(self) -> Optional[PortfolioData]:
        """Get the stored portfolio, or None if nothing has been stored."""
        payload = self._get_payload(PORTFOLIO_DATA_KEY)
        if payload is None:
            return None
        return _portfolio_adapter.validate_json(payload)

    def set(self, data: PortfolioData) -> None:
        """Replace the stored portfolio."""
        self._put_payload(PORTFOLIO_DATA_KEY, _portfolio_adapter.dump_json(data).decode("utf-8"))

    def clear(self) -> None:
        self._delete(PORTFOLIO_DATA_KEY)


class SqlAlchemyTransactionCacheRepository(_SqlAlchemyKeyValueStore):
    """SQLAlchemy-backed store for the imported raw trade history."""

    def list_all(self) -> list[Transaction]:
        """Get all stored trades in import order."""
        payload = self._get_payload(RAW_TRANSACTIONS_KEY)
        if payload is None:
            return []
        return _transactions_adapter.validate_json(payload)

    def replace_all(self, transactions: list[Transaction]) -> None:
        """Replace the stored trade history."""
        self._put_payload(
            RAW_TRANSACTIONS_KEY,
            _transactions_adapter.dump_json(list(transactions)).decode("utf-8"),
        )

    def clear(self) -> None:
        self._delete(RAW_TRANSACTIONS_KEY)
