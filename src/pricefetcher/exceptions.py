"""Custom exceptions for the price fetcher service.

All client, strategy and decorator exceptions live here
to avoid circular imports between modules.
"""


class PriceFetcherError(Exception):
    """Base exception for all price fetcher errors."""


class ExchangeApiError(PriceFetcherError):
    """Raised when the exchange call fails or returns an unusable payload.

    Considered transient: the retry decorator retries it.
    """


class InvalidArgumentError(PriceFetcherError, ValueError):
    """Raised for caller input errors (unknown contract type, bad limit, ...).

    Never retried.
    """
