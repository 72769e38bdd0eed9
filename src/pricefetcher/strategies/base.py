"""Price fetching capability shared by strategies and their decorators.

Decorators hold a reference to an inner PriceFetchingStrategy and implement
the same interface, so behaviors compose by wrapping rather than inheritance.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from pricefetcher.models import ContractType, KlineRecord


class PriceFetchingStrategy(ABC):
    """Abstract capability: klines and latest price per contract type."""

    @abstractmethod
    async def get_klines(
        self,
        contract_type: ContractType | str,
        interval: str = "1h",
        limit: int = 100,
    ) -> list[KlineRecord]:
        """Get up to ``limit`` klines for a contract type."""
        ...

    @abstractmethod
    async def get_latest_price(self, contract_type: ContractType | str) -> Decimal:
        """Get the latest close price for a contract type."""
        ...

    def describe(self) -> str:
        """Name of this strategy, including any wrapped strategies."""
        return type(self).__name__
