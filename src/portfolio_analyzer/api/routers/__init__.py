"""API routers package."""

from portfolio_analyzer.api.routers.portfolio import router as portfolio_router
from portfolio_analyzer.api.routers.prices import router as prices_router

__all__ = [
    "portfolio_router",
    "prices_router",
]
