"""Price provider protocol."""

from typing import Protocol

from portfolio_analyzer.domain.views import PriceQuote


class PriceProvider(Protocol):
    """
    Protocol for current-price sources.

    Prices are unit prices in the portfolio currency.
    """

    def get_prices(self, symbols: list[str]) -> dict[str, PriceQuote]:
        """
        Fetch current prices for multiple symbols.

        Returns dict mapping symbol -> PriceQuote.
        Unsupported or unknown symbols are omitted from the result.
        """
        ...
