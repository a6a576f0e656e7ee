"""CSV import utilities."""

from portfolio_analyzer.csv.importer import CsvImporter

__all__ = [
    "CsvImporter",
]
