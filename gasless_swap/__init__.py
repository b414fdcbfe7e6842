"""Gasless swap — quote, sign, submit and settle a 0x gasless trade."""

__version__ = "0.1.0"
