"""Pydantic schemas for API request/response."""

from portfolio_analyzer.api.schemas.portfolio import (
    AssetSummaryResponse,
    PortfolioStatsResponse,
    PortfolioResponse,
    TransactionResponse,
    TransactionListResponse,
    ImportSummaryResponse,
    ImportResponse,
    ApplyPricesRequest,
    PriceQuoteResponse,
)

__all__ = [
    "AssetSummaryResponse",
    "PortfolioStatsResponse",
    "PortfolioResponse",
    "TransactionResponse",
    "TransactionListResponse",
    "ImportSummaryResponse",
    "ImportResponse",
    "ApplyPricesRequest",
    "PriceQuoteResponse",
]
