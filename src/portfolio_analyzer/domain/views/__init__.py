"""View models for service outputs."""

from portfolio_analyzer.domain.views.portfolio import (
    AssetSummary,
    PortfolioStats,
    PortfolioData,
    PriceQuote,
    ImportSummary,
)

__all__ = [
    "AssetSummary",
    "PortfolioStats",
    "PortfolioData",
    "PriceQuote",
    "ImportSummary",
]
