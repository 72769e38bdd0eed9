"""Factory that builds a fully decorated price fetching strategy.

Composition order, innermost first:
1. Base strategy for the exchange (BinanceFuturesStrategy)
2. RateLimitingDecorator -- every attempt, including retries, passes the gate
3. RetryDecorator
"""

from collections.abc import Callable

from pricefetcher.config import FetcherSettings
from pricefetcher.decorators.rate_limiting import RateLimitingDecorator
from pricefetcher.decorators.retry import RetryDecorator
from pricefetcher.exceptions import InvalidArgumentError
from pricefetcher.exchange.client import FuturesClient
from pricefetcher.logging import get_logger
from pricefetcher.strategies.base import PriceFetchingStrategy
from pricefetcher.strategies.binance_strategy import BinanceFuturesStrategy

logger = get_logger(__name__)


class PriceFetchingStrategyFactory:
    """Creates strategies by exchange name, wrapped in the resilience chain."""

    def __init__(self, client: FuturesClient, settings: FetcherSettings) -> None:
        self._client = client
        self._settings = settings
        self._builders: dict[str, Callable[[], PriceFetchingStrategy]] = {
            "binance": lambda: BinanceFuturesStrategy(self._client),
        }

    def create_strategy(self, exchange: str) -> PriceFetchingStrategy:
        """Build the decorated strategy for ``exchange`` (case-insensitive).

        Raises:
            InvalidArgumentError: If the exchange is not supported.
        """
        builder = self._builders.get(exchange.lower())
        if builder is None:
            raise InvalidArgumentError(f"Unsupported exchange: {exchange}")

        strategy: PriceFetchingStrategy = builder()
        strategy = RateLimitingDecorator(
            strategy,
            max_requests_per_second=self._settings.max_requests_per_second,
        )
        strategy = RetryDecorator(
            strategy,
            max_retries=self._settings.max_retries,
            base_delay=self._settings.retry_base_delay,
        )

        logger.info("strategy_created", exchange=exchange, chain=strategy.describe())
        return strategy
