"""Request transports: one full GET through a proxy.

Both transports wrap an ``httpx.AsyncClient``. The protocol of a proxy is
mapped to a transport class once, when the transport is created, so the
benchmark loop only ever sees the ``RequestTransport`` protocol.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from proxybench.errors import RequestError, TransportSetupError, UnsupportedProtocolError
from proxybench.proxy.types import ProxyEndpoint, ProxyProtocol

logger = logging.getLogger(__name__)


class RequestTransport(Protocol):
    """Capability to perform one GET through a proxy and return the body."""

    async def perform_request(self, url: str) -> bytes: ...

    async def aclose(self) -> None: ...


class _ProxiedClientTransport:
    """Shared GET logic for transports backed by an httpx client."""

    proxy_scheme: str = "http"

    def __init__(
        self,
        proxy: ProxyEndpoint,
        timeout_seconds: float,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._proxy = proxy
        if client is not None:
            self._client = client
            return

        try:
            self._client = httpx.AsyncClient(
                proxy=proxy.proxy_url(self.proxy_scheme),
                timeout=httpx.Timeout(timeout_seconds),
            )
        except (httpx.InvalidURL, ValueError, ImportError) as exc:
            raise TransportSetupError(
                f"failed to create {self.proxy_scheme} client for proxy {proxy.address}: {exc}",
                proxy=proxy.address,
            ) from exc

    async def perform_request(self, url: str) -> bytes:
        """GET *url* through the proxy and return the raw response body.

        The body is returned whatever the status code; callers that care about
        the content use the response validator.
        """
        try:
            response = await self._client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise RequestError(
                f"request via {self._proxy.address} failed: {exc!r}",
                proxy=self._proxy.address,
            ) from exc
        return response.content

    async def aclose(self) -> None:
        await self._client.aclose()


class HttpTransport(_ProxiedClientTransport):
    """Forwarding transport for ``http`` and ``https`` proxies.

    Credentials are embedded in the proxy URL. Both protocols talk plain HTTP
    to the proxy itself; ``https`` only describes the proxy's listing.
    """

    proxy_scheme = "http"


class Socks5Transport(_ProxiedClientTransport):
    """Authenticated SOCKS5 tunnel transport (needs ``httpx[socks]``)."""

    proxy_scheme = "socks5"


TRANSPORTS: dict[ProxyProtocol, type[_ProxiedClientTransport]] = {
    ProxyProtocol.HTTP: HttpTransport,
    ProxyProtocol.HTTPS: HttpTransport,
    ProxyProtocol.SOCKS: Socks5Transport,
}


def create_transport(proxy: ProxyEndpoint, timeout_seconds: float) -> RequestTransport:
    """Build the transport matching the proxy's protocol.

    Raises ``UnsupportedProtocolError`` when no transport class is registered
    for the protocol and ``TransportSetupError`` when the client cannot be
    constructed.
    """
    transport_cls = TRANSPORTS.get(proxy.protocol)
    if transport_cls is None:
        raise UnsupportedProtocolError(
            f"no transport registered for protocol {proxy.protocol.value}",
            protocol=proxy.protocol.value,
        )
    return transport_cls(proxy, timeout_seconds)
