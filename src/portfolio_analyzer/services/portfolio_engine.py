"""Portfolio accounting engine: weighted-average cost basis and price overlay."""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from portfolio_analyzer.core.timezone import now_jst
from portfolio_analyzer.domain.models import (
    Transaction,
    TradeKind,
    SortField,
    SortDirection,
)
from portfolio_analyzer.domain.views import (
    AssetSummary,
    PortfolioStats,
    PortfolioData,
    PriceQuote,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class AssetAccumulator:
    """Running totals for one asset while replaying the trade history."""

    total_buy_amount: Decimal = ZERO
    total_sell_amount: Decimal = ZERO
    total_fees: Decimal = ZERO
    total_buy_quantity: Decimal = ZERO
    total_sell_quantity: Decimal = ZERO
    net_quantity: Decimal = ZERO
    weighted_rate_sum: Decimal = ZERO
    buy_count: int = 0
    sell_count: int = 0

    def add(self, txn: Transaction) -> None:
        if txn.kind == TradeKind.BUY:
            self.total_buy_amount += txn.amount
            self.total_buy_quantity += txn.quantity
            self.weighted_rate_sum += txn.rate * txn.quantity
            self.buy_count += 1
            self.net_quantity += txn.quantity
        elif txn.kind == TradeKind.SELL:
            self.total_sell_amount += txn.amount
            self.total_sell_quantity += txn.quantity
            self.sell_count += 1
            self.net_quantity -= txn.quantity
        self.total_fees += txn.fee

    def to_summary(self, asset_symbol: str) -> AssetSummary:
        average_purchase_rate = (
            self.weighted_rate_sum / self.total_buy_quantity
            if self.total_buy_quantity > 0
            else ZERO
        )

        # Short positions are not modeled: nothing held, nothing invested
        current_holding_investment = (
            self.net_quantity * average_purchase_rate if self.net_quantity > 0 else ZERO
        )

        # Every sold unit is costed at the final all-time average buy rate,
        # including sells that happened before later buys.
        realized_profit = ZERO
        if self.total_sell_quantity > 0 and average_purchase_rate > 0:
            sold_cost = self.total_sell_quantity * average_purchase_rate
            realized_profit = self.total_sell_amount - sold_cost

        return AssetSummary(
            asset_symbol=asset_symbol,
            holding_quantity=self.net_quantity,
            total_investment=self.total_buy_amount,
            current_holding_investment=current_holding_investment,
            average_purchase_rate=average_purchase_rate,
            total_fees=self.total_fees,
            buy_count=self.buy_count,
            sell_count=self.sell_count,
            total_sell_amount=self.total_sell_amount,
            realized_profit=realized_profit,
        )


def analyze(transactions: Iterable[Transaction]) -> PortfolioData:
    """
    Compute the portfolio summary from the complete trade history.

    This is a full recompute: cost basis depends on every buy ever made, so
    callers run it again whenever the transaction set changes. Summary items
    appear in the order each asset is first seen in ``transactions``.
    """
    accumulators: dict[str, AssetAccumulator] = {}
    txn_count = 0

    for txn in transactions:
        accumulator = accumulators.get(txn.asset_symbol)
        if accumulator is None:
            accumulator = accumulators[txn.asset_symbol] = AssetAccumulator()
        accumulator.add(txn)
        txn_count += 1

    summary = [acc.to_summary(symbol) for symbol, acc in accumulators.items()]

    stats = PortfolioStats(
        total_investment=sum((item.total_investment for item in summary), ZERO),
        total_realized_profit=sum((item.realized_profit for item in summary), ZERO),
        total_fees=sum((item.total_fees for item in summary), ZERO),
        asset_count=len(summary),
    )

    logger.debug("Analyzed %d transactions across %d assets", txn_count, len(summary))

    return PortfolioData(summary=summary, stats=stats, last_updated=now_jst())


def _overlay_item(item: AssetSummary, quote: Optional[PriceQuote]) -> AssetSummary:
    if quote is not None:
        price = quote.unit_price
        unrealized_profit = (
            item.holding_quantity * (price - item.average_purchase_rate)
            if item.holding_quantity > 0
            else ZERO
        )
        if unrealized_profit != 0:
            return replace(
                item,
                current_price=price,
                current_value=item.holding_quantity * price,
                unrealized_profit=unrealized_profit,
                total_profit=item.realized_profit + unrealized_profit,
            )

    # No quote, or a position whose unrealized profit is exactly zero: shown
    # as unpriced; the dashboard reads a zero price as "no live price".
    return replace(
        item,
        current_price=ZERO,
        current_value=ZERO,
        unrealized_profit=ZERO,
        total_profit=item.realized_profit,
    )


def _quote_for(prices: Mapping[str, PriceQuote], asset_symbol: str) -> Optional[PriceQuote]:
    # Price sources key quotes by upper-case ticker
    quote = prices.get(asset_symbol)
    if quote is None:
        quote = prices.get(asset_symbol.upper())
    return quote


def apply_prices(
    portfolio_data: Optional[PortfolioData],
    prices: Mapping[str, PriceQuote],
) -> Optional[PortfolioData]:
    """
    Overlay current prices onto an ``analyze`` result.

    Returns a new value; the input is left untouched. Safe to call
    speculatively: input without a summary is returned as-is.
    """
    if portfolio_data is None or portfolio_data.summary is None:
        return portfolio_data

    summary = [
        _overlay_item(item, _quote_for(prices, item.asset_symbol))
        for item in portfolio_data.summary
    ]

    base = portfolio_data.stats
    total_unrealized_profit = sum((item.unrealized_profit for item in summary), ZERO)
    total_profit = base.total_realized_profit + total_unrealized_profit

    stats = replace(
        base,
        total_unrealized_profit=total_unrealized_profit,
        total_profit=total_profit,
        profitable_asset_count=sum(1 for item in summary if item.effective_total_profit > 0),
        losing_asset_count=sum(1 for item in summary if item.effective_total_profit < 0),
        overall_profit_margin_percent=(
            total_profit / base.total_investment * 100
            if base.total_investment > 0
            else ZERO
        ),
    )

    return replace(portfolio_data, summary=summary, stats=stats)


def strip_prices(portfolio_data: PortfolioData) -> PortfolioData:
    """Return a copy without any price-derived fields, ready to persist."""
    summary = [
        replace(
            item,
            current_price=None,
            current_value=None,
            unrealized_profit=None,
            total_profit=None,
        )
        for item in portfolio_data.summary or []
    ]
    stats = replace(
        portfolio_data.stats,
        total_unrealized_profit=ZERO,
        total_profit=ZERO,
        profitable_asset_count=0,
        losing_asset_count=0,
        overall_profit_margin_percent=ZERO,
    )
    return replace(portfolio_data, summary=summary, stats=stats)


_SORT_KEYS = {
    SortField.AVERAGE_PURCHASE_RATE: lambda item: item.average_purchase_rate,
    SortField.TOTAL_INVESTMENT: lambda item: item.total_investment,
    SortField.CURRENT_HOLDING_INVESTMENT: lambda item: item.current_holding_investment,
    SortField.CURRENT_PRICE: lambda item: item.current_price or ZERO,
    SortField.CURRENT_VALUE: lambda item: item.current_value or ZERO,
    SortField.REALIZED_PROFIT: lambda item: item.realized_profit,
    SortField.UNREALIZED_PROFIT: lambda item: item.unrealized_profit or ZERO,
    SortField.TOTAL_PROFIT: lambda item: item.effective_total_profit,
    SortField.ASSET_SYMBOL: lambda item: item.asset_symbol,
}


def sort_summary(
    summary: Iterable[AssetSummary],
    field: SortField = SortField.REALIZED_PROFIT,
    direction: SortDirection = SortDirection.DESC,
) -> list[AssetSummary]:
    """
    Sort summary items for display.

    Unpriced overlay columns sort as zero. Returns a new list.
    """
    field = SortField(field)
    direction = SortDirection(direction)
    return sorted(
        summary,
        key=_SORT_KEYS[field],
        reverse=direction == SortDirection.DESC,
    )
