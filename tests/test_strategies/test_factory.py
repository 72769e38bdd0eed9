"""Tests for PriceFetchingStrategyFactory composition order."""

import time
from unittest.mock import AsyncMock

import pytest

from conftest import make_kline
from pricefetcher.config import FetcherSettings
from pricefetcher.decorators.rate_limiting import RateLimitingDecorator
from pricefetcher.decorators.retry import RetryDecorator
from pricefetcher.exceptions import ExchangeApiError, InvalidArgumentError
from pricefetcher.exchange.client import FuturesClient
from pricefetcher.models import ContractType
from pricefetcher.strategies.binance_strategy import BinanceFuturesStrategy
from pricefetcher.strategies.factory import PriceFetchingStrategyFactory


@pytest.fixture
def factory(fetcher_settings: FetcherSettings) -> PriceFetchingStrategyFactory:
    return PriceFetchingStrategyFactory(AsyncMock(spec=FuturesClient), fetcher_settings)


def test_retry_wraps_rate_limiter_wraps_base(factory: PriceFetchingStrategyFactory) -> None:
    strategy = factory.create_strategy("binance")

    assert isinstance(strategy, RetryDecorator)
    assert isinstance(strategy._inner, RateLimitingDecorator)
    assert isinstance(strategy._inner._inner, BinanceFuturesStrategy)
    assert strategy.describe() == (
        "RetryDecorator(RateLimitingDecorator(BinanceFuturesStrategy))"
    )


def test_settings_flow_into_decorators(factory: PriceFetchingStrategyFactory) -> None:
    strategy = factory.create_strategy("binance")

    assert strategy.max_retries == 2
    assert strategy._inner.interval == pytest.approx(0.001)


def test_exchange_name_is_case_insensitive(factory: PriceFetchingStrategyFactory) -> None:
    assert isinstance(factory.create_strategy("BINANCE"), RetryDecorator)


def test_unknown_exchange_raises(factory: PriceFetchingStrategyFactory) -> None:
    with pytest.raises(InvalidArgumentError, match="Unsupported exchange: kraken"):
        factory.create_strategy("kraken")


def test_each_call_builds_independent_chain(factory: PriceFetchingStrategyFactory) -> None:
    assert factory.create_strategy("binance") is not factory.create_strategy("binance")


@pytest.mark.asyncio
async def test_retry_attempts_pass_through_rate_limiter() -> None:
    dispatched: list[float] = []

    async def flaky_get_klines(*args, **kwargs):
        dispatched.append(time.monotonic())
        if len(dispatched) == 1:
            raise ExchangeApiError("Failed to fetch klines for BTCUSD_Q")
        return [make_kline()]

    client = AsyncMock(spec=FuturesClient)
    client.get_klines.side_effect = flaky_get_klines
    settings = FetcherSettings(
        max_requests_per_second=10, max_retries=2, retry_base_delay=0.0
    )
    strategy = PriceFetchingStrategyFactory(client, settings).create_strategy("binance")

    klines = await strategy.get_klines(ContractType.CURRENT_QUARTER)

    assert len(klines) == 1
    assert len(dispatched) == 2
    # zero backoff, so only the limiter spaces the second attempt
    assert dispatched[1] - dispatched[0] >= 0.1 - 0.005
