"""Gasless swap — config package."""

from .settings import GaslessConfig, Settings, settings

__all__ = [
    "GaslessConfig",
    "Settings",
    "settings",
]
