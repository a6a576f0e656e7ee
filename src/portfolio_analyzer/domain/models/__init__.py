"""Domain models package."""

from portfolio_analyzer.domain.models.enums import (
    TradeKind,
    Exchange,
    CsvFormat,
    SortField,
    SortDirection,
    ProfitStatus,
)
from portfolio_analyzer.domain.models.transaction import Transaction

__all__ = [
    "TradeKind",
    "Exchange",
    "CsvFormat",
    "SortField",
    "SortDirection",
    "ProfitStatus",
    "Transaction",
]
