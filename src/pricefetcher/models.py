"""Shared data models for the price fetcher.

CRITICAL: All prices and volumes use Decimal. Never use float for market data.
"""

import math
import re
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

KLINE_FIELD_COUNT = 11

# Plain ASCII decimal: no digit grouping, no non-ASCII digits
_DECIMAL_RE = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


class ContractType(str, Enum):
    """Futures contract tenor. Values match the exchange ``contractType`` tags."""

    CURRENT_QUARTER = "CURRENT_QUARTER"
    NEXT_QUARTER = "NEXT_QUARTER"


def parse_decimal(value: Any) -> Decimal:
    """Parse a JSON number or decimal string into a Decimal.

    Decimal parsing is locale independent. Empty strings and nulls read as
    zero; anything else that is not a finite number raises ValueError.
    """
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, bool):
        raise ValueError(f"boolean is not a decimal: {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"non-finite number: {value!r}")
        # str() keeps the shortest repr, avoiding binary float noise
        return Decimal(str(value))
    if isinstance(value, str) and not _DECIMAL_RE.fullmatch(value.strip()):
        raise ValueError(f"invalid decimal: {value!r}")
    if isinstance(value, (int, str)):
        try:
            result = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation as e:
            raise ValueError(f"invalid decimal: {value!r}") from e
        if not result.is_finite():
            raise ValueError(f"non-finite decimal: {value!r}")
        return result
    raise ValueError(f"unsupported decimal value: {value!r}")


def parse_int(value: Any) -> int:
    """Parse a JSON integer (or an integral string) into an int."""
    if isinstance(value, bool):
        raise ValueError(f"boolean is not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.isascii() and value.strip().lstrip("-").isdigit():
        return int(value)
    raise ValueError(f"invalid integer: {value!r}")


@dataclass(frozen=True)
class KlineRecord:
    """One candlestick in the Binance kline wire layout."""

    open_time: int  # Unix milliseconds
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal
    close_time: int  # Unix milliseconds
    quote_asset_volume: Decimal
    number_of_trades: int
    taker_buy_base_asset_volume: Decimal
    taker_buy_quote_asset_volume: Decimal

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "KlineRecord":
        """Build a record from one raw kline array.

        Raises ValueError if the row is not an 11-field array or a field
        cannot be parsed. Trailing fields beyond the 11th are ignored.
        """
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise ValueError(f"kline row is not an array: {row!r}")
        if len(row) < KLINE_FIELD_COUNT:
            raise ValueError(
                f"kline row has {len(row)} fields, expected {KLINE_FIELD_COUNT}"
            )
        return cls(
            open_time=parse_int(row[0]),
            open=parse_decimal(row[1]),
            high=parse_decimal(row[2]),
            low=parse_decimal(row[3]),
            close=parse_decimal(row[4]),
            volume=parse_decimal(row[5]),
            close_time=parse_int(row[6]),
            quote_asset_volume=parse_decimal(row[7]),
            number_of_trades=parse_int(row[8]),
            taker_buy_base_asset_volume=parse_decimal(row[9]),
            taker_buy_quote_asset_volume=parse_decimal(row[10]),
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe dict; Decimals rendered as strings."""
        return {
            key: str(value) if isinstance(value, Decimal) else value
            for key, value in asdict(self).items()
        }


def latest_close(klines: Sequence[KlineRecord]) -> Decimal:
    """Close of the most recent candle, or zero when there are none."""
    return klines[-1].close if klines else Decimal("0")


@dataclass(frozen=True)
class FetchResult:
    """Kline series for both contracts, fetched together as one snapshot."""

    quarter: list[KlineRecord]
    bi_quarter: list[KlineRecord]
