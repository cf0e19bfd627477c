"""Tradle: daily trading-challenge generation and par-performance simulation."""

__version__ = "0.1.0"
