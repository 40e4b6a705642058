"""Proxy package: endpoint parsing, latency probe and request transports."""

from proxybench.proxy.ping import LatencyProbe
from proxybench.proxy.transport import (
    HttpTransport,
    RequestTransport,
    Socks5Transport,
    create_transport,
)
from proxybench.proxy.types import ProxyEndpoint, ProxyProtocol, parse_proxy

__all__ = [
    "HttpTransport",
    "LatencyProbe",
    "ProxyEndpoint",
    "ProxyProtocol",
    "RequestTransport",
    "Socks5Transport",
    "create_transport",
    "parse_proxy",
]
