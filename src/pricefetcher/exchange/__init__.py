"""Exchange client layer -- Binance COIN-M futures API integration via ccxt."""

from pricefetcher.exchange.binance_client import BinanceFuturesClient
from pricefetcher.exchange.client import FuturesClient

__all__ = ["BinanceFuturesClient", "FuturesClient"]
