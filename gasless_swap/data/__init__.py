"""Gasless swap — data package."""

from .rest_client import GaslessRestClient, response_body

__all__ = [
    "GaslessRestClient",
    "response_body",
]
