"""Rate limiting decorator for price fetching strategies.

Spaces the *start* of dispatched calls by at least 1 / max_requests_per_second
seconds across all concurrent callers sharing one instance. The asyncio.Lock
is held only for the wait and the timestamp update, never for the wrapped
call itself, so dispatched calls may still overlap in flight.
"""

import asyncio
import time
from decimal import Decimal

from pricefetcher.exceptions import InvalidArgumentError
from pricefetcher.logging import get_logger
from pricefetcher.models import ContractType, KlineRecord
from pricefetcher.strategies.base import PriceFetchingStrategy

logger = get_logger(__name__)


class RateLimitingDecorator(PriceFetchingStrategy):
    """Serializes dispatch through a lock and enforces a minimum spacing.

    Args:
        inner: The strategy to delegate to.
        max_requests_per_second: Dispatch budget; interval = 1 / this value.
    """

    def __init__(
        self,
        inner: PriceFetchingStrategy,
        max_requests_per_second: float = 5,
    ) -> None:
        if max_requests_per_second <= 0:
            raise InvalidArgumentError(
                f"max_requests_per_second must be positive, got {max_requests_per_second}"
            )
        self._inner = inner
        self._interval = 1.0 / max_requests_per_second
        self._lock = asyncio.Lock()
        self._last_dispatch: float | None = None

    @property
    def interval(self) -> float:
        """Minimum spacing between dispatches, in seconds."""
        return self._interval

    def describe(self) -> str:
        return f"{type(self).__name__}({self._inner.describe()})"

    async def get_klines(
        self,
        contract_type: ContractType | str,
        interval: str = "1h",
        limit: int = 100,
    ) -> list[KlineRecord]:
        await self._acquire_slot()
        return await self._inner.get_klines(contract_type, interval, limit)

    async def get_latest_price(self, contract_type: ContractType | str) -> Decimal:
        await self._acquire_slot()
        return await self._inner.get_latest_price(contract_type)

    async def _acquire_slot(self) -> None:
        """Wait until the next dispatch slot and claim it.

        If the caller is cancelled while waiting, CancelledError propagates,
        the lock is released and no slot is recorded.
        """
        async with self._lock:
            if self._last_dispatch is not None:
                elapsed = time.monotonic() - self._last_dispatch
                if elapsed < self._interval:
                    delay = self._interval - elapsed
                    logger.info("rate_limit_applied", delay_ms=round(delay * 1000, 1))
                    await asyncio.sleep(delay)
            self._last_dispatch = time.monotonic()
