"""Shared test fixtures for the price fetcher."""

import asyncio
from decimal import Decimal

import pytest

from pricefetcher.config import BinanceSettings, FetcherSettings
from pricefetcher.models import ContractType, KlineRecord
from pricefetcher.strategies.base import PriceFetchingStrategy

# ---------------------------------------------------------------------------
# Sample exchange payloads (Binance COIN-M wire format)
# ---------------------------------------------------------------------------

MOCK_EXCHANGE_INFO = {
    "timezone": "UTC",
    "symbols": [
        {"symbol": "BTCUSD_PERP", "contractType": "PERPETUAL"},
        {"symbol": "BTCUSD_Q", "contractType": "CURRENT_QUARTER"},
        {"symbol": "BTCUSD_NQ", "contractType": "NEXT_QUARTER"},
        {"symbol": "ETHUSD_Q", "contractType": "CURRENT_QUARTER"},
    ],
}


def make_kline_row(open_time: int = 1_700_000_000_000, close: str = "50500.4") -> list:
    """One raw kline array with string-encoded decimals, as Binance sends it."""
    return [
        open_time,
        "50000.0",
        "50600.0",
        "49900.1",
        close,
        "1234.5",
        open_time + 3_599_999,
        "2.4689",
        321,
        "600.25",
        "1.2011",
        "0",  # ignored trailing field
    ]


def make_kline(close: str = "50500.4", open_time: int = 1_700_000_000_000) -> KlineRecord:
    return KlineRecord.from_row(make_kline_row(open_time=open_time, close=close))


class FakeStrategy(PriceFetchingStrategy):
    """In-memory strategy that records calls and can fail on demand.

    ``failures`` is a list of exceptions raised, in order, by the first calls.
    """

    def __init__(
        self,
        klines: dict[ContractType, list[KlineRecord]] | None = None,
        failures: list[BaseException] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.klines = klines or {}
        self.failures = list(failures or [])
        self.delay = delay
        self.calls: list[tuple] = []

    async def _maybe_fail(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.failures:
            raise self.failures.pop(0)

    async def get_klines(self, contract_type, interval="1h", limit=100):
        self.calls.append(("get_klines", ContractType(contract_type), interval, limit))
        await self._maybe_fail()
        return list(self.klines.get(ContractType(contract_type), []))[:limit]

    async def get_latest_price(self, contract_type):
        self.calls.append(("get_latest_price", ContractType(contract_type)))
        await self._maybe_fail()
        klines = self.klines.get(ContractType(contract_type), [])
        return klines[-1].close if klines else Decimal("0")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def binance_settings() -> BinanceSettings:
    """Binance settings pointing at a test base URL."""
    return BinanceSettings(base_url="https://dapi.test.invalid/dapi/v1/", timeout_ms=1000)


@pytest.fixture
def fetcher_settings() -> FetcherSettings:
    """Fast resilience policy so tests never wait on real backoff."""
    return FetcherSettings(
        max_requests_per_second=1000,
        max_retries=2,
        retry_base_delay=0.001,
    )
