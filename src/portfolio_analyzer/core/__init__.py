"""Core utilities and shared functionality."""

from portfolio_analyzer.core.timezone import (
    now_jst,
    to_jst,
    parse_datetime_jst,
    JST_TZ,
)
from portfolio_analyzer.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
)

__all__ = [
    "now_jst",
    "to_jst",
    "parse_datetime_jst",
    "JST_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
]
