"""FastAPI application factory with error translation for exchange failures."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pricefetcher.api.routes import health, prices
from pricefetcher.exceptions import ExchangeApiError
from pricefetcher.manager import PriceFetcherManager

log = structlog.get_logger(__name__)


async def _exchange_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "exchange_api_error",
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(
        status_code=502,
        content={"message": "Error communicating with Binance API"},
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "unhandled_error",
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"message": "An unexpected error occurred"},
    )


def create_app(manager: PriceFetcherManager, lifespan: Any = None) -> FastAPI:
    """Create and configure the price fetcher API.

    Args:
        manager: Shared fetch manager used by every request.
        lifespan: Optional async context manager for startup/shutdown.
                  Used by main.py to close the exchange client.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="Futures Price Fetcher",
        lifespan=lifespan,
    )
    app.state.manager = manager

    app.add_exception_handler(ExchangeApiError, _exchange_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(health.router)
    app.include_router(prices.router, prefix="/prices")

    return app
