"""Price fetching strategies and the factory that decorates them."""

from pricefetcher.strategies.base import PriceFetchingStrategy
from pricefetcher.strategies.binance_strategy import BinanceFuturesStrategy

__all__ = ["BinanceFuturesStrategy", "PriceFetchingStrategy"]
