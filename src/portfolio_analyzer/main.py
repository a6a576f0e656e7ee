"""FastAPI application: CSV import, stored portfolio and price overlay over HTTP."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from portfolio_analyzer import __version__
from portfolio_analyzer.config.settings import get_settings
from portfolio_analyzer.config.logging_config import setup_logging
from portfolio_analyzer.repositories.sqlalchemy.database import init_db
from portfolio_analyzer.api.routers import portfolio_router, prices_router
from portfolio_analyzer.core.exceptions import AppError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_db()
    logger.info("Portfolio store ready at %s", get_settings().get_database_url())
    yield


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Cost basis and profit tracking for crypto exchange trade exports",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(portfolio_router)
app.include_router(prices_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map application errors to ``{"error", "message"}`` bodies."""
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """API name, version and docs location."""
    return {
        "app": settings.app_name,
        "version": __version__,
        "base_currency": settings.base_currency,
        "docs": "/docs",
    }
