"""Pydantic schemas for portfolio endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from portfolio_analyzer.domain.models import TradeKind, Exchange, ProfitStatus


class AssetSummaryResponse(BaseModel):
    """Response schema for one asset row. Overlay fields are null until prices are applied."""

    model_config = ConfigDict(from_attributes=True)

    asset_symbol: str
    holding_quantity: Decimal
    total_investment: Decimal
    current_holding_investment: Decimal
    average_purchase_rate: Decimal
    total_fees: Decimal
    buy_count: int
    sell_count: int
    total_sell_amount: Decimal
    realized_profit: Decimal
    current_price: Optional[Decimal] = None
    current_value: Optional[Decimal] = None
    unrealized_profit: Optional[Decimal] = None
    total_profit: Optional[Decimal] = None
    profit_status: ProfitStatus
    investment_efficiency_percent: Decimal


class PortfolioStatsResponse(BaseModel):
    """Response schema for portfolio-wide statistics."""

    model_config = ConfigDict(from_attributes=True)

    total_investment: Decimal
    total_realized_profit: Decimal
    total_fees: Decimal
    asset_count: int
    total_unrealized_profit: Decimal
    total_profit: Decimal
    profitable_asset_count: int
    losing_asset_count: int
    overall_profit_margin_percent: Decimal


class PortfolioResponse(BaseModel):
    """Response schema for the stored portfolio."""

    model_config = ConfigDict(from_attributes=True)

    summary: list[AssetSummaryResponse]
    stats: PortfolioStatsResponse
    last_updated: Optional[datetime] = None


class TransactionResponse(BaseModel):
    """Response schema for a stored trade."""

    model_config = ConfigDict(from_attributes=True)

    asset_symbol: str
    kind: TradeKind
    quantity: Decimal
    rate: Decimal
    amount: Decimal
    fee: Decimal
    traded_at: Optional[datetime] = None
    exchange: Optional[Exchange] = None
    source_file: Optional[str] = None


class TransactionListResponse(BaseModel):
    """Response schema for the trade history."""

    transactions: list[TransactionResponse]
    count: int
    buy_count: int = 0
    sell_count: int = 0


class ImportSummaryResponse(BaseModel):
    """Response schema for CSV import results."""

    model_config = ConfigDict(from_attributes=True)

    parsed_count: int
    added_count: int
    duplicate_count: int
    error_count: int
    errors: list[str]
    file_names: list[str]


class ImportResponse(BaseModel):
    """Import summary together with the recomputed portfolio."""

    summary: ImportSummaryResponse
    portfolio: PortfolioResponse


class ApplyPricesRequest(BaseModel):
    """Request schema for applying caller-supplied prices."""

    prices: dict[str, Decimal] = Field(
        ..., description="Unit price per asset symbol in the portfolio currency"
    )


class PriceQuoteResponse(BaseModel):
    """Response schema for a current price."""

    model_config = ConfigDict(from_attributes=True)

    symbol: str
    unit_price: Decimal
    as_of: Optional[datetime] = None
