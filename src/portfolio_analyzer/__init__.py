"""Crypto portfolio analyzer: cost basis, realized and unrealized profit from exchange trades."""

__version__ = "0.1.0"
