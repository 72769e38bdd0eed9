"""Current-snapshot use case: klines for both quarterly contracts at once."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from pricefetcher.logging import get_logger
from pricefetcher.models import ContractType, FetchResult

if TYPE_CHECKING:
    from pricefetcher.strategies.factory import PriceFetchingStrategyFactory

logger = get_logger(__name__)


class PriceFetcherManager:
    """Holds one decorated strategy and fetches paired kline snapshots.

    The strategy is created once and shared by every request, so the rate
    limiter inside it sees all traffic.

    Args:
        strategy_factory: Builds the decorated strategy.
        exchange: Exchange name passed to the factory.
    """

    def __init__(
        self,
        strategy_factory: PriceFetchingStrategyFactory,
        exchange: str = "binance",
    ) -> None:
        self._strategy = strategy_factory.create_strategy(exchange)
        logger.info("price_fetcher_manager_initialized", strategy=self._strategy.describe())

    async def fetch_current_prices(
        self, interval: str = "1h", limit: int = 100
    ) -> FetchResult:
        """Fetch klines for CURRENT_QUARTER and NEXT_QUARTER concurrently.

        Both fetches must succeed. If one fails, the other is cancelled and
        the failure propagates unchanged; a partial pair is never returned.
        """
        logger.info("fetching_prices", interval=interval, limit=limit)

        quarter_task = asyncio.ensure_future(
            self._strategy.get_klines(ContractType.CURRENT_QUARTER, interval, limit)
        )
        bi_quarter_task = asyncio.ensure_future(
            self._strategy.get_klines(ContractType.NEXT_QUARTER, interval, limit)
        )
        try:
            quarter, bi_quarter = await asyncio.gather(quarter_task, bi_quarter_task)
        except BaseException:
            for task in (quarter_task, bi_quarter_task):
                task.cancel()
            raise

        logger.info(
            "prices_fetched",
            quarter_count=len(quarter),
            bi_quarter_count=len(bi_quarter),
        )
        return FetchResult(quarter=quarter, bi_quarter=bi_quarter)
