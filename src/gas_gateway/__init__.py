"""Ethereum gas estimation gateway."""

__version__ = "1.0.0"
