"""Domain layer - pure business models with no external dependencies."""

from portfolio_analyzer.domain.models import (
    Transaction,
    TradeKind,
    Exchange,
    CsvFormat,
    SortField,
    SortDirection,
    ProfitStatus,
)

__all__ = [
    "Transaction",
    "TradeKind",
    "Exchange",
    "CsvFormat",
    "SortField",
    "SortDirection",
    "ProfitStatus",
]
