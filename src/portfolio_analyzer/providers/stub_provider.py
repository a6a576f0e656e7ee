"""Stub price provider for offline/testing use."""

from decimal import Decimal
from typing import Optional

from portfolio_analyzer.core.timezone import now_jst
from portfolio_analyzer.domain.views import PriceQuote


# Deterministic JPY prices for the assets listed on GMO Coin / OKCoin Japan
_STUB_PRICES: dict[str, Decimal] = {
    "BTC": Decimal("15250000"),
    "ETH": Decimal("520000"),
    "SOL": Decimal("28500"),
    "XRP": Decimal("385.2"),
    "ADA": Decimal("112.4"),
    "DOGE": Decimal("31.85"),
    "ASTR": Decimal("9.42"),
    "XTZ": Decimal("168.3"),
    "XLM": Decimal("52.7"),
    "SHIB": Decimal("0.003412"),
    "PEPE": Decimal("0.001785"),
    "SUI": Decimal("610.5"),
    "DAI": Decimal("151.2"),
}


class StubPriceProvider:
    """
    Stub provider with deterministic fake prices for offline operation.

    Symbols outside the supported list are omitted, like a real price API
    that has no listing for them.
    """

    def __init__(self, prices: Optional[dict[str, Decimal]] = None):
        self._prices = dict(prices) if prices is not None else dict(_STUB_PRICES)

    def get_prices(self, symbols: list[str]) -> dict[str, PriceQuote]:
        """Return stub prices for requested symbols."""
        as_of = now_jst()
        result: dict[str, PriceQuote] = {}

        for symbol in symbols:
            upper_symbol = symbol.upper()
            if upper_symbol in self._prices:
                result[upper_symbol] = PriceQuote(
                    symbol=upper_symbol,
                    unit_price=self._prices[upper_symbol],
                    as_of=as_of,
                )

        return result

    @property
    def supported_symbols(self) -> list[str]:
        return sorted(self._prices)
