"""
Unit tests for CSV import.

Tests cover:
- GMO Coin trade history parsing
- OKCoin Japan order history parsing
- Auto-detection and explicit formats
- Row-level error reporting
- Shift_JIS decoding
- Import into the portfolio with duplicate detection
- Validation of already-parsed trades
"""

import pytest
from dataclasses import replace
from decimal import Decimal
from pathlib import Path

from portfolio_analyzer.csv import CsvImporter
from portfolio_analyzer.domain.models import TradeKind, Exchange, CsvFormat
from portfolio_analyzer.core.exceptions import ValidationError

from tests.conftest import buy, jst_datetime


GMO_HEADER = "日時,精算区分,銘柄名,売買区分,約定数量,約定レート,日本円受渡金額,注文手数料\n"


# =============================================================================
# GMO PARSING TESTS
# =============================================================================


class TestGmoParsing:
    """Tests for the GMO Coin layout."""

    def test_parse_spot_trades(self, csv_importer: CsvImporter, gmo_csv_content: str):
        """
        GIVEN a GMO export with four spot trades, a deposit and a JPY row
        WHEN I parse it
        THEN only the four spot trades are returned
        """
        txns, errors = csv_importer.parse_text(gmo_csv_content, "gmo.csv")

        assert errors == []
        assert [t.asset_symbol for t in txns] == ["BTC", "BTC", "ETH", "BTC"]
        assert [t.kind for t in txns] == [
            TradeKind.BUY,
            TradeKind.BUY,
            TradeKind.BUY,
            TradeKind.SELL,
        ]

    def test_parsed_values(self, csv_importer: CsvImporter, gmo_csv_content: str):
        txns, _ = csv_importer.parse_text(gmo_csv_content, "gmo.csv")

        sale = txns[3]
        assert sale.quantity == Decimal("0.01")
        assert sale.rate == Decimal("10000000")
        assert sale.amount == Decimal("100000")
        assert sale.fee == Decimal("12")
        assert sale.exchange == Exchange.GMO
        assert sale.source_file == "gmo.csv"
        assert sale.traded_at == jst_datetime(2024, 3, 20, 10, 15, 0)

    def test_invalid_side_reported(self, csv_importer: CsvImporter):
        """
        GIVEN a spot trade row with an unknown side
        WHEN I parse it
        THEN the row is skipped and an error names the file and row
        """
        text = GMO_HEADER + "2024-01-10 09:00:00,取引所現物取引,BTC,?,1,1,1,0\n"

        txns, errors = csv_importer.parse_text(text, "bad.csv")

        assert txns == []
        assert errors == ["bad.csv row 2: Invalid trade side: ?"]

    def test_invalid_number_reported(self, csv_importer: CsvImporter):
        text = (
            GMO_HEADER
            + "2024-01-10 09:00:00,取引所現物取引,BTC,買,abc,1,1,0\n"
            + "2024-01-11 09:00:00,取引所現物取引,BTC,買,1,100,100,0\n"
        )

        txns, errors = csv_importer.parse_text(text, "bad.csv")

        assert len(txns) == 1
        assert len(errors) == 1
        assert errors[0].startswith("bad.csv row 2:")

    def test_symbol_upper_cased(self, csv_importer: CsvImporter):
        """
        GIVEN a spot trade row with a lower-case symbol
        WHEN I parse it
        THEN the symbol is stored upper-case, matching price-source keys
        """
        text = GMO_HEADER + "2024-01-10 09:00:00,取引所現物取引,btc,買,1,100,100,0\n"

        txns, _ = csv_importer.parse_text(text, "gmo.csv")

        assert txns[0].asset_symbol == "BTC"

    def test_zero_quantity_ignored(self, csv_importer: CsvImporter):
        text = GMO_HEADER + "2024-01-10 09:00:00,取引所現物取引,BTC,買,0,1,0,0\n"

        txns, errors = csv_importer.parse_text(text, "gmo.csv")

        assert txns == []
        assert errors == []


# =============================================================================
# OKJ PARSING TESTS
# =============================================================================


class TestOkjParsing:
    """Tests for the OKCoin Japan layout."""

    def test_only_filled_buys(self, csv_importer: CsvImporter, okj_csv_content: str):
        """
        GIVEN an OKJ export with a filled buy, a cancelled buy and a sell
        WHEN I parse it
        THEN only the filled buy is returned, without fee
        """
        txns, errors = csv_importer.parse_text(okj_csv_content, "okj.csv")

        assert errors == []
        assert len(txns) == 1
        txn = txns[0]
        assert txn.asset_symbol == "XRP"
        assert txn.kind == TradeKind.BUY
        assert txn.quantity == Decimal("1000")
        assert txn.amount == Decimal("75000")
        assert txn.fee == Decimal("0")
        assert txn.exchange == Exchange.OKJ

    def test_explicit_format_ignores_other_layout(
        self,
        csv_importer: CsvImporter,
        gmo_csv_content: str,
    ):
        txns, _ = csv_importer.parse_text(gmo_csv_content, "gmo.csv", CsvFormat.OKJ)

        assert txns == []


# =============================================================================
# DECODING TESTS
# =============================================================================


class TestDecoding:
    """Tests for byte decoding."""

    def test_shift_jis_bytes(self, csv_importer: CsvImporter, okj_csv_content: str):
        txns, errors = csv_importer.parse_bytes(okj_csv_content.encode("cp932"), "okj.csv")

        assert errors == []
        assert txns[0].asset_symbol == "XRP"

    def test_utf8_bom(self, csv_importer: CsvImporter, gmo_csv_content: str):
        txns, _ = csv_importer.parse_bytes(gmo_csv_content.encode("utf-8-sig"), "gmo.csv")

        assert len(txns) == 4


# =============================================================================
# IMPORT TESTS
# =============================================================================


class TestImportCsv:
    """Tests for importing files into the portfolio."""

    def test_import_file(
        self,
        csv_importer: CsvImporter,
        temp_csv_file: str,
        gmo_csv_content: str,
    ):
        """
        GIVEN a GMO export on disk
        WHEN I import it
        THEN the portfolio reflects weighted-average cost and realized profit
        """
        Path(temp_csv_file).write_text(gmo_csv_content, encoding="utf-8")

        portfolio, summary = csv_importer.import_csv([temp_csv_file])

        assert summary.parsed_count == 4
        assert summary.added_count == 4
        assert summary.error_count == 0
        btc = next(i for i in portfolio.summary if i.asset_symbol == "BTC")
        assert btc.average_purchase_rate == Decimal("7000000")
        assert btc.realized_profit == Decimal("30000")
        assert btc.holding_quantity == Decimal("0.02")
        assert btc.total_fees == Decimal("12")

    def test_reimport_detects_duplicates(
        self,
        csv_importer: CsvImporter,
        temp_csv_file: str,
        gmo_csv_content: str,
    ):
        Path(temp_csv_file).write_text(gmo_csv_content, encoding="utf-8")
        csv_importer.import_csv([temp_csv_file])

        _, summary = csv_importer.import_csv([temp_csv_file])

        assert summary.added_count == 0
        assert summary.duplicate_count == 4

    def test_invalid_parsed_trades_reported(self, csv_importer: CsvImporter):
        """
        GIVEN already-parsed trades where one has a zero quantity
        WHEN I import them
        THEN the invalid trade is reported as an error and the rest are added
        """
        good = buy("BTC", "1", "100")
        bad = replace(buy("ETH", "1", "10"), quantity=Decimal("0"), source_file="manual.csv")

        _, summary = csv_importer.import_parsed([good, bad], [], ["manual.csv"])

        assert summary.added_count == 1
        assert summary.error_count == 1
        assert summary.errors[0].startswith("manual.csv: Quantity must be positive")

    def test_only_invalid_parsed_trades(self, csv_importer: CsvImporter):
        bad = replace(buy("ETH", "1", "10"), asset_symbol="")

        with pytest.raises(ValidationError, match="No valid transactions"):
            csv_importer.import_parsed([bad], [], [])

    def test_missing_file(self, csv_importer: CsvImporter):
        with pytest.raises(ValidationError, match="File not found"):
            csv_importer.import_csv(["/nonexistent/trades.csv"])

    def test_no_valid_rows(self, csv_importer: CsvImporter, temp_csv_file: str):
        Path(temp_csv_file).write_text(GMO_HEADER, encoding="utf-8")

        with pytest.raises(ValidationError, match="No valid transactions"):
            csv_importer.import_csv([temp_csv_file])

    def test_errors_carried_into_summary(self, csv_importer: CsvImporter, temp_csv_file: str):
        text = (
            GMO_HEADER
            + "2024-01-10 09:00:00,取引所現物取引,BTC,?,1,1,1,0\n"
            + "2024-01-11 09:00:00,取引所現物取引,BTC,買,1,100,100,0\n"
        )
        Path(temp_csv_file).write_text(text, encoding="utf-8")

        _, summary = csv_importer.import_csv([temp_csv_file])

        assert summary.added_count == 1
        assert summary.error_count == 1
        assert "Invalid trade side" in summary.errors[0]
