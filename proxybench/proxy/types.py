"""Proxy data models and the proxy string parser.

Proxies are configured as ``protocol:host:port:username:password:status``
strings, e.g. ``http:proxy1.example.com:8080:alice:s3cret:enabled``. Only
proxies whose status is ``enabled`` take part in a benchmark run.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote

from proxybench.errors import ConfigError

_ENABLED = "enabled"
_DISABLED = "disabled"


class ProxyProtocol(str, Enum):
    """Supported proxy protocols."""

    HTTP = "http"
    HTTPS = "https"
    SOCKS = "socks"


@dataclass(frozen=True)
class ProxyEndpoint:
    """A single parsed proxy endpoint. Immutable once parsed."""

    protocol: ProxyProtocol
    host: str
    port: int
    username: str = ""
    password: str = ""
    enabled: bool = True

    @property
    def address(self) -> str:
        """``host:port``, safe to log."""
        return f"{self.host}:{self.port}"

    @property
    def identity(self) -> str:
        """Canonical serialized form used to key metrics."""
        status = _ENABLED if self.enabled else _DISABLED
        return (
            f"{self.protocol.value}:{self.host}:{self.port}:"
            f"{self.username}:{self.password}:{status}"
        )

    def proxy_url(self, scheme: str) -> str:
        """Build a proxy URL with embedded credentials for the given scheme."""
        if self.username or self.password:
            userinfo = f"{quote(self.username, safe='')}:{quote(self.password, safe='')}@"
        else:
            userinfo = ""
        return f"{scheme}://{userinfo}{self.address}"

    def __str__(self) -> str:
        return self.identity


def parse_proxy(raw: str) -> ProxyEndpoint:
    """Parse a ``protocol:host:port:user:pass:status`` string.

    Raises ``ConfigError`` if the string does not have exactly six fields, the
    protocol is not supported, the host is not a valid hostname, or the port
    is not a valid TCP port.
    """
    parts = raw.strip().split(":")
    if len(parts) != 6:
        raise ConfigError(f"invalid proxy format: expected 6 fields, got {len(parts)}")

    protocol_raw, host, port_raw, username, password, status = parts

    try:
        protocol = ProxyProtocol(protocol_raw.lower())
    except ValueError:
        raise ConfigError(f"unsupported proxy protocol: {protocol_raw}") from None

    if not host:
        raise ConfigError("invalid proxy format: empty host")
    try:
        host.encode("idna")
    except UnicodeError:
        raise ConfigError(f"invalid proxy host: {host}") from None

    try:
        port = int(port_raw)
    except ValueError:
        raise ConfigError(f"invalid proxy port: {port_raw}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"proxy port out of range: {port}")

    return ProxyEndpoint(
        protocol=protocol,
        host=host,
        port=port,
        username=username,
        password=password,
        enabled=status == _ENABLED,
    )
