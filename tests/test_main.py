"""Tests for settings loading and application wiring."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from pricefetcher.config import AppSettings, BinanceSettings, FetcherSettings
from pricefetcher.main import build_app
from pricefetcher.models import FetchResult


def test_fetcher_settings_defaults() -> None:
    settings = FetcherSettings()
    assert settings.max_requests_per_second == 5
    assert settings.max_retries == 3
    assert settings.retry_base_delay == 1.0
    assert settings.exchange == "binance"


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FETCHER_MAX_RETRIES", "5")
    monkeypatch.setenv("BINANCE_BASE_URL", "https://example.invalid/dapi/v1")

    assert FetcherSettings().max_retries == 5
    assert BinanceSettings().base_url == "https://example.invalid/dapi/v1"


def test_build_app_registers_routes(binance_settings, fetcher_settings) -> None:
    app = build_app(AppSettings(binance=binance_settings, fetcher=fetcher_settings))

    app.state.manager.fetch_current_prices = AsyncMock(
        return_value=FetchResult(quarter=[], bi_quarter=[])
    )
    client = TestClient(app)

    assert client.get("/health").status_code == 200
    assert client.get("/prices").status_code == 200
    assert client.get("/prices/klines", params={"limit": 1}).status_code == 200
    assert client.get("/missing").status_code == 404


def test_lifespan_starts_and_stops(binance_settings, fetcher_settings) -> None:
    app = build_app(AppSettings(binance=binance_settings, fetcher=fetcher_settings))

    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
