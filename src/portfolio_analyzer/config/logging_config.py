"""Logging setup for the API server and in-process use."""

import logging
import sys
from typing import Optional

from portfolio_analyzer.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that log every request or multipart chunk at INFO/DEBUG
_QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "multipart": logging.WARNING,
    "python_multipart": logging.WARNING,
    "uvicorn": logging.INFO,
}


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging to stdout.

    ``level`` overrides the configured ``log_level`` (e.g. "DEBUG" to see
    per-analysis accounting output from the engine).
    """
    level_name = (level or get_settings().log_level).upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
