"""Abstract futures client interface.

Strategies depend only on this interface, keeping the Binance-specific
endpoints and wire parsing isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from pricefetcher.models import ContractType, KlineRecord


class FuturesClient(ABC):
    """Abstract base class for quarterly futures market data clients."""

    @abstractmethod
    async def resolve_symbols(self) -> dict[ContractType, str]:
        """Resolve contract types to exchange symbols. Idempotent, cached."""
        ...

    @abstractmethod
    async def get_klines(
        self,
        contract_type: ContractType | str,
        interval: str = "1h",
        limit: int = 100,
    ) -> list[KlineRecord]:
        """Fetch up to ``limit`` candles for a contract type, oldest first."""
        ...

    @abstractmethod
    async def get_latest_price(self, contract_type: ContractType | str) -> Decimal:
        """Close of the latest 1h candle, or zero when the exchange has none."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release HTTP resources."""
        ...
