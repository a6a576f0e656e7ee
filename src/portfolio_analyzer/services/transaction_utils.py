"""Helpers for working with imported trade lists: dedupe, merge, validate, group."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from portfolio_analyzer.core.exceptions import ValidationError
from portfolio_analyzer.domain.models import Transaction, TradeKind

logger = logging.getLogger(__name__)

QUANTITY_TOLERANCE = Decimal("0.00000001")
AMOUNT_TOLERANCE = Decimal("0.01")


@dataclass
class MergeResult:
    """Outcome of merging a new batch into the stored trade history."""

    transactions: list[Transaction] = field(default_factory=list)
    added_count: int = 0
    duplicate_count: int = 0


def is_duplicate(a: Transaction, b: Transaction) -> bool:
    """
    Return True if two rows describe the same trade.

    Exchanges re-export overlapping date ranges, so the same execution
    shows up in several files with tiny rounding differences.
    """
    return (
        a.traded_at == b.traded_at
        and a.asset_symbol == b.asset_symbol
        and a.exchange == b.exchange
        and a.kind == b.kind
        and abs(a.quantity - b.quantity) < QUANTITY_TOLERANCE
        and abs(a.amount - b.amount) < AMOUNT_TOLERANCE
    )


def merge(existing: list[Transaction], incoming: Iterable[Transaction]) -> MergeResult:
    """
    Append incoming trades that are not already in ``existing``.

    Existing order is kept and new rows are appended in input order. Rows
    are checked against the existing history only, not against each other.
    """
    result = MergeResult(transactions=list(existing))
    incoming = list(incoming)

    for txn in incoming:
        if any(is_duplicate(known, txn) for known in existing):
            result.duplicate_count += 1
        else:
            result.transactions.append(txn)
            result.added_count += 1

    logger.info(
        "Merged transactions: %d new, %d duplicates, %d added",
        len(incoming),
        result.duplicate_count,
        result.added_count,
    )
    return result


def validate(txn: Transaction) -> None:
    """Raise ValidationError if the trade cannot be used for accounting."""
    if not (txn.asset_symbol or "").strip():
        raise ValidationError("Missing asset symbol")

    for name in ("quantity", "rate", "amount", "fee"):
        value = getattr(txn, name)
        if not isinstance(value, Decimal) or not value.is_finite():
            raise ValidationError(f"Invalid {name}: {value}")

    if txn.quantity <= 0:
        raise ValidationError(f"Quantity must be positive: {txn.quantity}")


def filter_by_asset(transactions: Iterable[Transaction], asset_symbol: str) -> list[Transaction]:
    return [txn for txn in transactions if txn.asset_symbol == asset_symbol]


def sort_by_date(transactions: Iterable[Transaction], ascending: bool = True) -> list[Transaction]:
    """Sort trades by execution time. Undated trades go last in either order."""
    transactions = list(transactions)
    dated = [txn for txn in transactions if txn.traded_at is not None]
    undated = [txn for txn in transactions if txn.traded_at is None]
    dated.sort(key=_traded_at, reverse=not ascending)
    return dated + undated


def categorize_by_kind(transactions: Iterable[Transaction]) -> dict[TradeKind, list[Transaction]]:
    """Split trades into buys and sells."""
    categorized: dict[TradeKind, list[Transaction]] = {
        TradeKind.BUY: [],
        TradeKind.SELL: [],
    }
    for txn in transactions:
        categorized[txn.kind].append(txn)
    return categorized


def _traded_at(txn: Transaction) -> datetime:
    return txn.traded_at
