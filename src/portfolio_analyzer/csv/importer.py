"""CSV import of exchange trade-history exports."""

import csv
import io
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Optional

from portfolio_analyzer.core.timezone import parse_datetime_jst
from portfolio_analyzer.core.exceptions import ValidationError
from portfolio_analyzer.domain.models import Transaction, TradeKind, Exchange, CsvFormat
from portfolio_analyzer.domain.views import PortfolioData, ImportSummary
from portfolio_analyzer.services import transaction_utils
from portfolio_analyzer.services.portfolio_data_service import PortfolioDataService

logger = logging.getLogger(__name__)

# GMO Coin trade history columns
GMO_SETTLEMENT_TYPE = "精算区分"
GMO_SPOT_TRADE = "取引所現物取引"
GMO_SYMBOL = "銘柄名"
GMO_SIDE = "売買区分"
GMO_AMOUNT = "日本円受渡金額"
GMO_QUANTITY = "約定数量"
GMO_FEE = "注文手数料"
GMO_RATE = "約定レート"
GMO_DATE = "日時"

# OKCoin Japan order history columns
OKJ_PAIR = "取引銘柄"
OKJ_SIDE = "売買"
OKJ_STATUS = "ステータス"
OKJ_FILLED = "全部約定"
OKJ_BUY = "購入"
OKJ_AMOUNT = "約定代金"
OKJ_QUANTITY = "約定数量"
OKJ_RATE = "平均約定価格"
OKJ_DATE = "注文日時"

_GMO_SIDES = {
    "買": TradeKind.BUY,
    "売": TradeKind.SELL,
}

BASE_CURRENCY = "JPY"

# Japanese exchanges still export Shift_JIS on some accounts
_FALLBACK_ENCODING = "cp932"


class CsvImporter:
    """
    CSV importer for GMO Coin and OKCoin Japan trade exports.

    Rows are parsed into Transactions and handed to the portfolio data
    service, which merges them with the stored history and recomputes.
    """

    def __init__(self, portfolio_service: PortfolioDataService):
        self._portfolio = portfolio_service

    def import_csv(
        self,
        paths: Iterable[str],
        csv_format: CsvFormat = CsvFormat.AUTO,
    ) -> tuple[PortfolioData, ImportSummary]:
        """
        Import one or more CSV files.

        Returns the recomputed portfolio and a summary with parsed/added/
        duplicate/error counts. Raises ValidationError if a file is missing
        or none of the files contains a usable trade.
        """
        transactions: list[Transaction] = []
        errors: list[str] = []
        file_names: list[str] = []

        for path in paths:
            file_path = Path(path)
            if not file_path.exists():
                raise ValidationError(f"File not found: {path}")
            parsed, file_errors = self.parse_file(file_path, csv_format)
            transactions.extend(parsed)
            errors.extend(file_errors)
            file_names.append(file_path.name)

        return self.import_parsed(transactions, errors, file_names)

    def import_parsed(
        self,
        transactions: list[Transaction],
        errors: list[str],
        file_names: list[str],
    ) -> tuple[PortfolioData, ImportSummary]:
        """
        Hand already-parsed rows to the portfolio service.

        Trades that fail validation are reported in the summary errors and
        left out of the import.
        """
        errors = list(errors)
        valid: list[Transaction] = []
        for txn in transactions:
            try:
                transaction_utils.validate(txn)
            except ValidationError as exc:
                errors.append(f"{txn.source_file or 'input'}: {exc.message}")
                continue
            valid.append(txn)

        if not valid:
            raise ValidationError("No valid transactions found")

        portfolio, summary = self._portfolio.import_transactions(valid, file_names)
        summary.error_count = len(errors)
        summary.errors = list(errors)
        return portfolio, summary

    def parse_file(
        self,
        path: Path,
        csv_format: CsvFormat = CsvFormat.AUTO,
    ) -> tuple[list[Transaction], list[str]]:
        return self.parse_bytes(path.read_bytes(), path.name, csv_format)

    def parse_bytes(
        self,
        raw: bytes,
        file_name: str,
        csv_format: CsvFormat = CsvFormat.AUTO,
    ) -> tuple[list[Transaction], list[str]]:
        """Decode raw CSV bytes (UTF-8 with optional BOM, else Shift_JIS) and parse."""
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            try:
                text = raw.decode(_FALLBACK_ENCODING)
            except UnicodeDecodeError:
                return [], [f"{file_name}: file is neither UTF-8 nor Shift_JIS"]
        return self.parse_text(text, file_name, csv_format)

    def parse_text(
        self,
        text: str,
        file_name: str,
        csv_format: CsvFormat = CsvFormat.AUTO,
    ) -> tuple[list[Transaction], list[str]]:
        """
        Parse CSV text into Transactions.

        Returns ``(transactions, errors)``. Rows that do not belong to a
        supported layout are ignored; rows that match but carry bad values
        produce one error each and are skipped.
        """
        csv_format = CsvFormat(csv_format)
        reader = csv.DictReader(io.StringIO(text))

        transactions: list[Transaction] = []
        errors: list[str] = []

        for row_num, row in enumerate(reader, start=2):  # row 1 is header
            if _is_blank(row):
                continue
            try:
                txn = None
                if csv_format in (CsvFormat.GMO, CsvFormat.AUTO):
                    txn = self._parse_gmo_row(row, file_name)
                if txn is None and csv_format in (CsvFormat.OKJ, CsvFormat.AUTO):
                    txn = self._parse_okj_row(row, file_name)
            except ValidationError as exc:
                errors.append(f"{file_name} row {row_num}: {exc.message}")
                continue
            if txn is not None:
                transactions.append(txn)

        logger.info(
            "Parsed %s: %d transactions, %d errors",
            file_name,
            len(transactions),
            len(errors),
        )
        return transactions, errors

    def _parse_gmo_row(self, row: dict[str, str], file_name: str) -> Optional[Transaction]:
        """Parse a GMO Coin spot trade row; None if the row is not one."""
        if GMO_SPOT_TRADE not in _field(row, GMO_SETTLEMENT_TYPE):
            return None

        symbol = _field(row, GMO_SYMBOL).upper()
        if not symbol or symbol == BASE_CURRENCY:
            return None

        side = _field(row, GMO_SIDE)
        if side not in _GMO_SIDES:
            raise ValidationError(f"Invalid trade side: {side}")

        quantity = _parse_decimal(_field(row, GMO_QUANTITY))
        if quantity <= 0:
            return None

        return Transaction(
            asset_symbol=symbol,
            kind=_GMO_SIDES[side],
            quantity=quantity,
            rate=_parse_decimal(_field(row, GMO_RATE)),
            amount=_parse_decimal(_field(row, GMO_AMOUNT)),
            fee=_parse_decimal(_field(row, GMO_FEE)),
            traded_at=_parse_datetime(_field(row, GMO_DATE)),
            exchange=Exchange.GMO,
            source_file=file_name,
        )

    def _parse_okj_row(self, row: dict[str, str], file_name: str) -> Optional[Transaction]:
        """
        Parse an OKCoin Japan fully-filled buy order; None otherwise.

        Only purchases are imported from this layout, and the export has no
        fee column, so fee is zero.
        """
        pair = _field(row, OKJ_PAIR)
        side = _field(row, OKJ_SIDE)
        if not pair or not side or _field(row, OKJ_STATUS) != OKJ_FILLED:
            return None

        symbol = pair.upper().replace(f"/{BASE_CURRENCY}", "")
        if symbol == BASE_CURRENCY or side != OKJ_BUY:
            return None

        quantity = _parse_decimal(_field(row, OKJ_QUANTITY))
        amount = _parse_decimal(_field(row, OKJ_AMOUNT))
        if quantity <= 0 or amount <= 0:
            return None

        return Transaction(
            asset_symbol=symbol,
            kind=TradeKind.BUY,
            quantity=quantity,
            rate=_parse_decimal(_field(row, OKJ_RATE)),
            amount=amount,
            fee=Decimal("0"),
            traded_at=_parse_datetime(_field(row, OKJ_DATE)),
            exchange=Exchange.OKJ,
            source_file=file_name,
        )


def _field(row: dict[str, str], name: str) -> str:
    return (row.get(name) or "").strip()


def _is_blank(row: dict[str, str]) -> bool:
    return all(not (value or "").strip() for value in row.values() if isinstance(value, str))


def _parse_decimal(value: str) -> Decimal:
    """Parse an exchange number ("1,234.5"); empty means zero."""
    value = value.replace(",", "").strip()
    if not value:
        return Decimal("0")
    try:
        result = Decimal(value)
    except InvalidOperation:
        raise ValidationError(f"Invalid decimal value: {value}")
    if not result.is_finite():
        raise ValidationError(f"Invalid decimal value: {value}")
    return result


def _parse_datetime(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return parse_datetime_jst(value)
    except (ValueError, OverflowError):
        raise ValidationError(f"Invalid date: {value}")
