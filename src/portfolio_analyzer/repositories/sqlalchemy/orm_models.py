"""SQLAlchemy ORM model definitions."""

from sqlalchemy import Column, String, DateTime, Text

from portfolio_analyzer.repositories.sqlalchemy.database import Base


class CacheEntryORM(Base):
    """Key/value row holding one JSON snapshot (portfolio or trade history)."""

    __tablename__ = "cache_entries"

    key = Column(String(64), primary_key=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
