"""Transaction domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_analyzer.domain.models.enums import TradeKind, Exchange


@dataclass
class Transaction:
    """
    A single executed exchange trade (spot buy or sell).

    All values are in the portfolio currency (JPY).
    - amount is the total consideration as reported by the exchange and is
      not required to equal quantity * rate
    - validation and deduplication happen before the accounting engine sees it
    """

    asset_symbol: str
    kind: TradeKind
    quantity: Decimal
    rate: Decimal
    amount: Decimal
    fee: Decimal = field(default_factory=lambda: Decimal("0"))
    traded_at: Optional[datetime] = None
    exchange: Optional[Exchange] = None
    source_file: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.kind, str):
            self.kind = TradeKind(self.kind)
        if isinstance(self.exchange, str):
            self.exchange = Exchange(self.exchange)

    @property
    def is_buy(self) -> bool:
        """Return True if this is a BUY trade."""
        return self.kind == TradeKind.BUY

    @property
    def is_sell(self) -> bool:
        """Return True if this is a SELL trade."""
        return self.kind == TradeKind.SELL
