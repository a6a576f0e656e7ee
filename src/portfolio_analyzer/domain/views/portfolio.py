"""View models for portfolio accounting outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_analyzer.domain.models.enums import ProfitStatus


def _zero() -> Decimal:
    return Decimal("0")


@dataclass
class AssetSummary:
    """
    Accounting summary for one asset.

    The overlay fields (current_price, current_value, unrealized_profit,
    total_profit) stay None until prices have been applied.
    """

    asset_symbol: str
    holding_quantity: Decimal = field(default_factory=_zero)
    total_investment: Decimal = field(default_factory=_zero)
    current_holding_investment: Decimal = field(default_factory=_zero)
    average_purchase_rate: Decimal = field(default_factory=_zero)
    total_fees: Decimal = field(default_factory=_zero)
    buy_count: int = 0
    sell_count: int = 0
    total_sell_amount: Decimal = field(default_factory=_zero)
    realized_profit: Decimal = field(default_factory=_zero)

    # Price overlay
    current_price: Optional[Decimal] = None
    current_value: Optional[Decimal] = None
    unrealized_profit: Optional[Decimal] = None
    total_profit: Optional[Decimal] = None

    @property
    def has_price_overlay(self) -> bool:
        """Return True once prices have been applied to this item."""
        return self.total_profit is not None

    @property
    def effective_total_profit(self) -> Decimal:
        """Total profit when priced, realized profit otherwise."""
        if self.total_profit is not None:
            return self.total_profit
        return self.realized_profit

    @property
    def profit_status(self) -> ProfitStatus:
        profit = self.effective_total_profit
        if profit > 0:
            return ProfitStatus.PROFIT
        if profit < 0:
            return ProfitStatus.LOSS
        return ProfitStatus.NEUTRAL

    @property
    def investment_efficiency_percent(self) -> Decimal:
        """Realized profit as a percentage of everything spent on buys."""
        if self.total_investment > 0:
            return self.realized_profit / self.total_investment * 100
        return Decimal("0")


@dataclass
class PortfolioStats:
    """Portfolio-wide totals. Price-dependent fields are zero until prices are applied."""

    total_investment: Decimal = field(default_factory=_zero)
    total_realized_profit: Decimal = field(default_factory=_zero)
    total_fees: Decimal = field(default_factory=_zero)
    asset_count: int = 0

    total_unrealized_profit: Decimal = field(default_factory=_zero)
    total_profit: Decimal = field(default_factory=_zero)
    profitable_asset_count: int = 0
    losing_asset_count: int = 0
    overall_profit_margin_percent: Decimal = field(default_factory=_zero)


@dataclass
class PortfolioData:
    """Computed portfolio value handed to callers and the cache store."""

    summary: list[AssetSummary] = field(default_factory=list)
    stats: PortfolioStats = field(default_factory=PortfolioStats)
    last_updated: Optional[datetime] = None

    @property
    def symbols(self) -> list[str]:
        return [item.asset_symbol for item in self.summary or []]


@dataclass
class PriceQuote:
    """Current unit price of an asset in the portfolio currency."""

    symbol: str
    unit_price: Decimal
    as_of: Optional[datetime] = None


@dataclass
class ImportSummary:
    """Summary of a CSV import operation."""

    parsed_count: int = 0
    added_count: int = 0
    duplicate_count: int = 0
    error_count: int = 0
    errors: list[str] = field(default_factory=list)
    file_names: list[str] = field(default_factory=list)
