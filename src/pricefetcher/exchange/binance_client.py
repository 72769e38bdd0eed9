"""Binance COIN-M futures client implementation via ccxt async.

Uses ccxt's implicit ``dapiPublic`` endpoints for the raw exchangeInfo and
klines payloads, resolves quarterly contract symbols once per client, and
parses kline rows into KlineRecord.
"""

import asyncio
from decimal import Decimal

import ccxt.async_support as ccxt_async

from pricefetcher.config import BinanceSettings
from pricefetcher.exceptions import ExchangeApiError, InvalidArgumentError
from pricefetcher.exchange.client import FuturesClient
from pricefetcher.logging import get_logger
from pricefetcher.models import ContractType, KlineRecord

logger = get_logger(__name__)


class BinanceFuturesClient(FuturesClient):
    """Binance quarterly futures client using ccxt async.

    Symbol resolution is single-flight: concurrent first callers await one
    shared resolution task, so at most one exchangeInfo request is in flight
    per client. A failed resolution clears the task and the next call retries.
    """

    def __init__(self, settings: BinanceSettings) -> None:
        self._settings = settings

        config: dict = {
            # Request pacing is owned by RateLimitingDecorator
            "enableRateLimit": False,
            "timeout": settings.timeout_ms,
            "urls": {
                "api": {
                    "dapiPublic": settings.base_url.rstrip("/"),
                },
            },
        }

        self._exchange = ccxt_async.binance(config)
        self._symbols: dict[ContractType, str] = {}
        self._resolution: asyncio.Task | None = None

    @property
    def exchange(self) -> ccxt_async.binance:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    async def close(self) -> None:
        """Clean up ccxt async resources. Must be called to avoid session leaks."""
        logger.info("closing_binance_connection")
        await self._exchange.close()

    # ──────────────────────────────────────────────
    # Symbol resolution
    # ──────────────────────────────────────────────

    def _symbols_resolved(self) -> bool:
        return all(self._symbols.get(contract) for contract in ContractType)

    async def resolve_symbols(self) -> dict[ContractType, str]:
        """Resolve CURRENT_QUARTER / NEXT_QUARTER to exchange symbols.

        No-op once both symbols are cached. Callers cancelled while waiting
        do not cancel the shared resolution for the others.
        """
        if self._symbols_resolved():
            return dict(self._symbols)

        if self._resolution is None or self._resolution.done():
            self._resolution = asyncio.ensure_future(self._load_symbols())
            self._resolution.add_done_callback(self._on_resolution_done)

        await asyncio.shield(self._resolution)
        return dict(self._symbols)

    def _on_resolution_done(self, task: asyncio.Task) -> None:
        failed = task.cancelled() or task.exception() is not None
        if failed and self._resolution is task:
            self._resolution = None

    async def _load_symbols(self) -> None:
        logger.info("resolving_futures_symbols")
        try:
            exchange_info = await self._exchange.dapiPublicGetExchangeInfo()
        except ccxt_async.BaseError as e:
            logger.error("exchange_info_fetch_failed", error=str(e))
            raise ExchangeApiError("Failed to fetch exchange info") from e

        entries = exchange_info.get("symbols") if isinstance(exchange_info, dict) else None
        if not isinstance(entries, list):
            logger.error(
                "exchange_info_malformed",
                payload_type=type(exchange_info).__name__,
            )
            raise ExchangeApiError("Failed to get exchange info")

        found: dict[ContractType, str] = {}
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            try:
                contract = ContractType(entry.get("contractType"))
            except ValueError:
                continue
            # First listing per contract type wins, even if its symbol is blank
            found.setdefault(contract, entry.get("symbol") or "")

        missing = [contract.value for contract in ContractType if not found.get(contract)]
        if missing:
            logger.error("futures_symbols_missing", missing=missing)
            raise ExchangeApiError(
                f"Failed to find required futures symbols: {', '.join(missing)}"
            )

        self._symbols = found
        logger.info(
            "futures_symbols_resolved",
            quarter=found[ContractType.CURRENT_QUARTER],
            bi_quarter=found[ContractType.NEXT_QUARTER],
        )

    # ──────────────────────────────────────────────
    # Market data
    # ──────────────────────────────────────────────

    async def get_klines(
        self,
        contract_type: ContractType | str,
        interval: str = "1h",
        limit: int = 100,
    ) -> list[KlineRecord]:
        """Fetch klines for the symbol behind ``contract_type``.

        Rows that fail to parse are skipped with a warning; the rest of the
        response is kept. At most ``limit`` rows (the most recent) are returned.

        Raises:
            InvalidArgumentError: Unknown contract type or non-positive limit.
            ExchangeApiError: Transport failure or a non-array payload.
        """
        await self.resolve_symbols()

        try:
            contract = ContractType(contract_type)
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid contract type: {contract_type}") from e
        if limit < 1:
            raise InvalidArgumentError(f"Invalid kline limit: {limit}")

        symbol = self._symbols[contract]
        logger.info("fetching_klines", symbol=symbol, interval=interval, limit=limit)

        try:
            response = await self._exchange.dapiPublicGetKlines(
                {"symbol": symbol, "interval": interval, "limit": limit}
            )
        except ccxt_async.BaseError as e:
            logger.error("klines_fetch_failed", symbol=symbol, error=str(e))
            raise ExchangeApiError(f"Failed to fetch klines for {symbol}") from e

        if response is None:
            return []
        if not isinstance(response, list):
            logger.error(
                "klines_response_malformed",
                symbol=symbol,
                payload_type=type(response).__name__,
            )
            raise ExchangeApiError(f"Failed to fetch klines for {symbol}")

        klines: list[KlineRecord] = []
        for index, row in enumerate(response):
            try:
                klines.append(KlineRecord.from_row(row))
            except (TypeError, ValueError) as e:
                logger.warning(
                    "kline_row_skipped", symbol=symbol, index=index, error=str(e)
                )

        if len(klines) > limit:
            klines = klines[-limit:]

        logger.info("klines_fetched", symbol=symbol, count=len(klines))
        return klines

    async def get_latest_price(self, contract_type: ContractType | str) -> Decimal:
        """Close of the latest 1h candle, or Decimal("0") if there is none."""
        klines = await self.get_klines(contract_type, "1h", 1)
        price = klines[0].close if klines else Decimal("0")
        logger.info(
            "latest_price",
            contract_type=ContractType(contract_type).value,
            price=str(price),
        )
        return price
