"""Current price endpoints."""

from fastapi import APIRouter, Depends, Query

from portfolio_analyzer.api.deps import get_price_service
from portfolio_analyzer.api.schemas import PriceQuoteResponse
from portfolio_analyzer.services import PriceService

router = APIRouter(prefix="/prices", tags=["prices"])


@router.get("", response_model=list[PriceQuoteResponse])
def get_prices(
    symbols: str = Query(..., description="Comma-separated symbols"),
    prices: PriceService = Depends(get_price_service),
) -> list[PriceQuoteResponse]:
    """Get current prices for symbols. Symbols without a price are omitted."""
    symbol_list = [s.strip().upper() for s in symbols.split(",") if s.strip()]
    quotes = prices.get_prices(symbol_list)

    return [PriceQuoteResponse.model_validate(q) for q in quotes.values()]
