"""HTTP API layer -- FastAPI application exposing the price snapshots."""

from pricefetcher.api.app import create_app

__all__ = ["create_app"]
