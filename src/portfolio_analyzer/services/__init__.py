"""Service layer - business logic orchestration."""

from portfolio_analyzer.services.portfolio_engine import (
    analyze,
    apply_prices,
    strip_prices,
    sort_summary,
)
from portfolio_analyzer.services.price_service import PriceService
from portfolio_analyzer.services.portfolio_data_service import PortfolioDataService

__all__ = [
    "analyze",
    "apply_prices",
    "strip_prices",
    "sort_summary",
    "PriceService",
    "PortfolioDataService",
]
