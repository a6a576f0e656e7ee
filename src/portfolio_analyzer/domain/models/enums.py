"""Enumerations for domain models."""

from enum import Enum


class TradeKind(str, Enum):
    """Direction of an exchange trade."""

    BUY = "BUY"
    SELL = "SELL"


class Exchange(str, Enum):
    """Exchanges whose trade-history exports can be imported."""

    GMO = "GMO"  # GMO Coin
    OKJ = "OKJ"  # OKCoin Japan


class CsvFormat(str, Enum):
    """CSV layouts accepted by the importer."""

    AUTO = "AUTO"  # detect per row
    GMO = "GMO"
    OKJ = "OKJ"


class SortField(str, Enum):
    """Summary columns the portfolio table can be sorted by."""

    ASSET_SYMBOL = "asset_symbol"
    AVERAGE_PURCHASE_RATE = "average_purchase_rate"
    TOTAL_INVESTMENT = "total_investment"
    CURRENT_HOLDING_INVESTMENT = "current_holding_investment"
    CURRENT_PRICE = "current_price"
    CURRENT_VALUE = "current_value"
    REALIZED_PROFIT = "realized_profit"
    UNREALIZED_PROFIT = "unrealized_profit"
    TOTAL_PROFIT = "total_profit"


class SortDirection(str, Enum):
    """Sort order."""

    ASC = "asc"
    DESC = "desc"


class ProfitStatus(str, Enum):
    """Display classification of an asset's profit."""

    PROFIT = "profit"
    LOSS = "loss"
    NEUTRAL = "neutral"
