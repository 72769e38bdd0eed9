"""Binance futures price fetching strategy.

Pure delegation to the FuturesClient plus request/response logging.
"""

from decimal import Decimal

from pricefetcher.exchange.client import FuturesClient
from pricefetcher.logging import get_logger
from pricefetcher.models import ContractType, KlineRecord
from pricefetcher.strategies.base import PriceFetchingStrategy

logger = get_logger(__name__)


def _contract_label(contract_type: ContractType | str) -> str:
    return contract_type.value if isinstance(contract_type, ContractType) else contract_type


class BinanceFuturesStrategy(PriceFetchingStrategy):
    """Fetches quarterly futures data from Binance through a FuturesClient."""

    def __init__(self, client: FuturesClient) -> None:
        self._client = client

    async def get_klines(
        self,
        contract_type: ContractType | str,
        interval: str = "1h",
        limit: int = 100,
    ) -> list[KlineRecord]:
        logger.info(
            "strategy_fetching_klines",
            contract_type=_contract_label(contract_type),
            interval=interval,
            limit=limit,
        )
        klines = await self._client.get_klines(contract_type, interval, limit)
        logger.info(
            "strategy_klines_retrieved",
            contract_type=_contract_label(contract_type),
            count=len(klines),
        )
        return klines

    async def get_latest_price(self, contract_type: ContractType | str) -> Decimal:
        logger.info(
            "strategy_fetching_latest_price",
            contract_type=_contract_label(contract_type),
        )
        price = await self._client.get_latest_price(contract_type)
        logger.info(
            "strategy_latest_price",
            contract_type=_contract_label(contract_type),
            price=str(price),
        )
        return price
