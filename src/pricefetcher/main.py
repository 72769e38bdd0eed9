"""Entry point for the futures price fetcher service.

Wires all components together and serves the FastAPI app with uvicorn.

Component wiring order (in build_app):
1. AppSettings (configuration)
2. Logging setup
3. BinanceFuturesClient
4. PriceFetchingStrategyFactory (rate limiting + retry chain)
5. PriceFetcherManager
6. FastAPI app with a lifespan that closes the client on shutdown
"""

import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from pricefetcher.api.app import create_app
from pricefetcher.config import AppSettings
from pricefetcher.exchange.binance_client import BinanceFuturesClient
from pricefetcher.logging import get_logger, setup_logging
from pricefetcher.manager import PriceFetcherManager
from pricefetcher.strategies.factory import PriceFetchingStrategyFactory


def build_app(settings: AppSettings) -> FastAPI:
    """Build the component graph and the API application around it."""
    logger = get_logger("pricefetcher.main")

    client = BinanceFuturesClient(settings.binance)
    factory = PriceFetchingStrategyFactory(client, settings.fetcher)
    manager = PriceFetcherManager(factory, exchange=settings.fetcher.exchange)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "price_fetcher_started",
            base_url=settings.binance.base_url,
            max_requests_per_second=settings.fetcher.max_requests_per_second,
            max_retries=settings.fetcher.max_retries,
        )
        try:
            yield
        finally:
            await client.close()
            logger.info("price_fetcher_stopped")

    return create_app(manager, lifespan=lifespan)


async def run() -> None:
    """Run the price fetcher API until uvicorn shuts down."""
    # 1. Load settings
    settings = AppSettings()

    # 2. Setup logging
    setup_logging(settings.log_level)
    logger = get_logger("pricefetcher.main")

    # 3-6. Build components and app
    app = build_app(settings)

    logger.info("starting_api", host=settings.api.host, port=settings.api.port)

    config = uvicorn.Config(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
