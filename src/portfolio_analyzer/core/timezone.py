"""Timezone utilities for Asia/Tokyo exchange time."""

from datetime import datetime
from typing import Optional

import pytz
from dateutil import parser as date_parser

JST_TZ = pytz.timezone("Asia/Tokyo")


def now_jst() -> datetime:
    """Return current time in Asia/Tokyo timezone."""
    return datetime.now(JST_TZ)


def to_jst(dt: datetime) -> datetime:
    """Convert a datetime to Asia/Tokyo timezone."""
    if dt.tzinfo is None:
        # Exchange exports are written in local (Tokyo) time
        return JST_TZ.localize(dt)
    return dt.astimezone(JST_TZ)


def parse_datetime_jst(value: str, default_tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """
    Parse a datetime string and return it in Asia/Tokyo timezone.

    If no timezone is provided in the string, assumes Asia/Tokyo.
    """
    dt = date_parser.parse(value)
    if dt.tzinfo is None:
        tz = default_tz or JST_TZ
        dt = tz.localize(dt)
    return to_jst(dt)
