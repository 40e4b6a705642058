"""Proxy benchmark: phased latency and request measurements across proxies."""

__version__ = "0.1.0"
