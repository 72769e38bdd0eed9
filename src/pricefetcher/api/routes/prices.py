"""Price snapshot endpoints for both quarterly contracts."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from pricefetcher.manager import PriceFetcherManager
from pricefetcher.models import KlineRecord, latest_close

log = structlog.get_logger(__name__)

router = APIRouter()

# Binance COIN-M klines endpoint accepts at most 1500 rows
MAX_KLINE_LIMIT = 1500


def _klines_to_json(klines: list[KlineRecord]) -> list[dict]:
    return [kline.to_dict() for kline in klines]


@router.get("")
async def get_current_prices(request: Request) -> JSONResponse:
    """Latest close for both contracts plus their hourly kline series."""
    manager: PriceFetcherManager = request.app.state.manager
    result = await manager.fetch_current_prices()

    return JSONResponse(
        content={
            "current_prices": {
                "quarter": str(latest_close(result.quarter)),
                "bi_quarter": str(latest_close(result.bi_quarter)),
            },
            "quarter_klines": _klines_to_json(result.quarter),
            "bi_quarter_klines": _klines_to_json(result.bi_quarter),
        }
    )


@router.get("/klines")
async def get_klines(
    request: Request,
    interval: str = Query("1h", min_length=1),
    limit: int = Query(100, ge=1, le=MAX_KLINE_LIMIT),
) -> JSONResponse:
    """Raw kline series for both contracts at the requested interval."""
    manager: PriceFetcherManager = request.app.state.manager
    result = await manager.fetch_current_prices(interval=interval, limit=limit)

    log.debug(
        "klines_served",
        interval=interval,
        limit=limit,
        quarter_count=len(result.quarter),
        bi_quarter_count=len(result.bi_quarter),
    )
    return JSONResponse(
        content={
            "quarter": _klines_to_json(result.quarter),
            "bi_quarter": _klines_to_json(result.bi_quarter),
        }
    )
