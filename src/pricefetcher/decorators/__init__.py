"""Resilience decorators -- rate limiting and retry around a price fetching strategy."""

from pricefetcher.decorators.rate_limiting import RateLimitingDecorator
from pricefetcher.decorators.retry import TRANSIENT_ERRORS, RetryDecorator

__all__ = ["RateLimitingDecorator", "RetryDecorator", "TRANSIENT_ERRORS"]
