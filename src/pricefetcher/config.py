"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class BinanceSettings(BaseSettings):
    """Binance COIN-M futures connection settings."""

    model_config = SettingsConfigDict(env_prefix="BINANCE_")

    base_url: str = "https://dapi.binance.com/dapi/v1"
    quarter_symbol: str = "BTCUSD_QUARTER"  # informational; resolved from exchangeInfo
    bi_quarter_symbol: str = "BTCUSD_BI-QUARTER"
    timeout_ms: int = 10_000


class FetcherSettings(BaseSettings):
    """Resilience policy for the price fetching strategy chain."""

    model_config = SettingsConfigDict(env_prefix="FETCHER_")

    exchange: str = "binance"
    max_requests_per_second: float = 5.0
    max_retries: int = 3
    retry_base_delay: float = 1.0  # seconds; the n-th retry waits base * 2**n


class ApiSettings(BaseSettings):
    """HTTP API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8080


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    binance: BinanceSettings = BinanceSettings()
    fetcher: FetcherSettings = FetcherSettings()
    api: ApiSettings = ApiSettings()
