"""Price providers module."""

from portfolio_analyzer.providers.price_provider import PriceProvider
from portfolio_analyzer.providers.stub_provider import StubPriceProvider

__all__ = [
    "PriceProvider",
    "StubPriceProvider",
]
