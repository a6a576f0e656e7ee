"""Portfolio endpoints: import, stored summary, price overlay."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from portfolio_analyzer.api.deps import get_portfolio_service, get_csv_importer
from portfolio_analyzer.api.schemas import (
    AssetSummaryResponse,
    PortfolioResponse,
    TransactionResponse,
    TransactionListResponse,
    ImportSummaryResponse,
    ImportResponse,
    ApplyPricesRequest,
)
from portfolio_analyzer.config.settings import get_settings
from portfolio_analyzer.core.exceptions import NotFoundError, ValidationError
from portfolio_analyzer.core.timezone import now_jst
from portfolio_analyzer.csv import CsvImporter
from portfolio_analyzer.domain.models import Transaction, TradeKind, CsvFormat, SortField, SortDirection
from portfolio_analyzer.domain.views import PortfolioData, PriceQuote
from portfolio_analyzer.services import PortfolioDataService, transaction_utils

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


def _to_response(portfolio: PortfolioData) -> PortfolioResponse:
    return PortfolioResponse.model_validate(portfolio)


def _require_portfolio(portfolio: Optional[PortfolioData]) -> PortfolioData:
    if portfolio is None:
        raise NotFoundError("Portfolio", "no transactions imported")
    return portfolio


@router.get("", response_model=PortfolioResponse)
def get_portfolio(
    service: PortfolioDataService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """Get the stored portfolio (with the last price overlay, if any)."""
    return _to_response(_require_portfolio(service.get_data()))


@router.get("/summary", response_model=list[AssetSummaryResponse])
def get_sorted_summary(
    sort_by: SortField = Query(SortField.REALIZED_PROFIT, description="Column to sort by"),
    direction: SortDirection = Query(SortDirection.DESC, description="asc or desc"),
    service: PortfolioDataService = Depends(get_portfolio_service),
) -> list[AssetSummaryResponse]:
    """Get summary rows sorted for display."""
    items = service.sorted_summary(sort_by, direction)
    return [AssetSummaryResponse.model_validate(item) for item in items]


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    asset: Optional[str] = Query(None, description="Only trades for this symbol"),
    newest_first: bool = Query(False, description="Sort by trade time descending"),
    service: PortfolioDataService = Depends(get_portfolio_service),
) -> TransactionListResponse:
    """List the imported trade history by trade time; undated trades last."""
    transactions = transaction_utils.sort_by_date(
        service.get_transactions(asset),
        ascending=not newest_first,
    )
    by_kind = transaction_utils.categorize_by_kind(transactions)
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        count=len(transactions),
        buy_count=len(by_kind[TradeKind.BUY]),
        sell_count=len(by_kind[TradeKind.SELL]),
    )


@router.post("/import", response_model=ImportResponse, status_code=201)
def import_csv(
    files: list[UploadFile] = File(...),
    csv_format: Optional[CsvFormat] = Query(None, description="AUTO, GMO or OKJ"),
    importer: CsvImporter = Depends(get_csv_importer),
) -> ImportResponse:
    """
    Import exchange CSV exports.

    Trades already imported are skipped. The portfolio is recomputed from
    the full history and stored without prices.
    """
    csv_format = csv_format or get_settings().default_csv_format
    transactions: list[Transaction] = []
    errors: list[str] = []
    file_names: list[str] = []

    for upload in files:
        file_name = upload.filename or "upload.csv"
        if not file_name.lower().endswith(".csv") and upload.content_type != "text/csv":
            errors.append(f"{file_name}: not a CSV file")
            continue
        parsed, file_errors = importer.parse_bytes(upload.file.read(), file_name, csv_format)
        transactions.extend(parsed)
        errors.extend(file_errors)
        file_names.append(file_name)

    if not file_names:
        raise ValidationError("No CSV files uploaded")

    portfolio, summary = importer.import_parsed(transactions, errors, file_names)
    return ImportResponse(
        summary=ImportSummaryResponse.model_validate(summary),
        portfolio=_to_response(portfolio),
    )


@router.post("/prices", response_model=PortfolioResponse)
def apply_prices(
    data: ApplyPricesRequest,
    service: PortfolioDataService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """Apply caller-supplied prices to the stored portfolio."""
    as_of = now_jst()
    prices = {
        symbol.upper(): PriceQuote(symbol=symbol.upper(), unit_price=price, as_of=as_of)
        for symbol, price in data.prices.items()
    }
    return _to_response(_require_portfolio(service.update_with_prices(prices)))


@router.post("/prices/refresh", response_model=PortfolioResponse)
def refresh_prices(
    service: PortfolioDataService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """Fetch current prices and apply them to the stored portfolio."""
    return _to_response(_require_portfolio(service.refresh_prices()))


@router.post("/rebuild", response_model=PortfolioResponse)
def rebuild_portfolio(
    service: PortfolioDataService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """Recompute the portfolio from the stored trade history."""
    return _to_response(service.rebuild())


@router.delete("", status_code=204)
def clear_portfolio(
    service: PortfolioDataService = Depends(get_portfolio_service),
) -> None:
    """Delete the stored trade history and portfolio."""
    service.reset()
