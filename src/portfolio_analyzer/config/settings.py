"""Runtime configuration, read from ``PORTFOLIO_*`` environment variables or ``.env``."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio_analyzer.domain.models.enums import CsvFormat

DB_FILE_NAME = "portfolio.db"


def get_default_data_dir() -> Path:
    return Path.home() / "Documents" / "Crypto Portfolio Data"


class Settings(BaseSettings):
    """Analyzer settings. ``PORTFOLIO_DATA_DIR=/tmp/x`` sets ``data_dir`` and so on."""

    model_config = SettingsConfigDict(
        env_prefix="PORTFOLIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Crypto Portfolio Analyzer"

    # Holds the SQLite store; defaults to ~/Documents/Crypto Portfolio Data
    data_dir: Optional[Path] = None

    # Overrides the SQLite file under data_dir
    database_url: Optional[str] = None

    log_level: str = "INFO"

    # Currency of every rate, amount, fee and quote
    base_currency: str = "JPY"

    # Price cache lifetime: 30 minutes
    price_cache_ttl_seconds: int = 1800

    default_csv_format: CsvFormat = CsvFormat.AUTO

    def get_data_dir(self) -> Path:
        """Data directory, created on first access."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.get_data_dir() / DB_FILE_NAME}"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide settings, loaded on first call."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Drop the loaded settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
