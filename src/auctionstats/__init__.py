"""Robust windowed unit-price estimates from auction trade history."""

__version__ = "0.1.0"
