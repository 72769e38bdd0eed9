"""Retry decorator with exponential backoff for price fetching strategies.

Only transient failures are retried: ExchangeApiError and transport errors.
Caller input errors (InvalidArgumentError) and anything else propagate on
the first attempt. Cancellation is never caught.
"""

import asyncio
from collections.abc import Awaitable, Callable
from decimal import Decimal
from typing import TypeVar

import ccxt.async_support as ccxt_async

from pricefetcher.exceptions import ExchangeApiError, InvalidArgumentError
from pricefetcher.logging import get_logger
from pricefetcher.models import ContractType, KlineRecord
from pricefetcher.strategies.base import PriceFetchingStrategy

logger = get_logger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    ExchangeApiError,
    ccxt_async.NetworkError,
    ConnectionError,
    TimeoutError,
)


class RetryDecorator(PriceFetchingStrategy):
    """Retries transient failures of the inner strategy with backoff.

    The n-th retry (n counted from 1) waits ``base_delay * 2**n`` seconds,
    i.e. 2s, 4s, 8s with the defaults. After ``max_retries`` retries the last
    failure is re-raised unchanged.

    Args:
        inner: The strategy to delegate to.
        max_retries: Retries after the initial attempt (default 3).
        base_delay: Backoff time unit in seconds (default 1.0).
    """

    def __init__(
        self,
        inner: PriceFetchingStrategy,
        max_retries: int = 3,
        base_delay: float = 1.0,
    ) -> None:
        if max_retries < 0:
            raise InvalidArgumentError(f"max_retries must be >= 0, got {max_retries}")
        if base_delay < 0:
            raise InvalidArgumentError(f"base_delay must be >= 0, got {base_delay}")
        self._inner = inner
        self._max_retries = max_retries
        self._base_delay = base_delay

    @property
    def max_retries(self) -> int:
        return self._max_retries

    def describe(self) -> str:
        return f"{type(self).__name__}({self._inner.describe()})"

    def backoff_delay(self, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt`` (1-based)."""
        return self._base_delay * (2**attempt)

    async def get_klines(
        self,
        contract_type: ContractType | str,
        interval: str = "1h",
        limit: int = 100,
    ) -> list[KlineRecord]:
        return await self._call_with_retry(
            "get_klines",
            lambda: self._inner.get_klines(contract_type, interval, limit),
        )

    async def get_latest_price(self, contract_type: ContractType | str) -> Decimal:
        return await self._call_with_retry(
            "get_latest_price",
            lambda: self._inner.get_latest_price(contract_type),
        )

    async def _call_with_retry(
        self, operation: str, call: Callable[[], Awaitable[T]]
    ) -> T:
        attempt = 0
        while True:
            try:
                return await call()
            except TRANSIENT_ERRORS as e:
                attempt += 1
                if attempt > self._max_retries:
                    logger.error(
                        "fetch_failed_permanently",
                        operation=operation,
                        attempts=attempt,
                        error=str(e),
                    )
                    raise

                delay = self.backoff_delay(attempt)
                logger.warning(
                    "fetch_retry",
                    operation=operation,
                    attempt=attempt,
                    max_retries=self._max_retries,
                    delay=delay,
                    error=str(e),
                )
                await asyncio.sleep(delay)
