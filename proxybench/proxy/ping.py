"""Connection latency probe.

Measures how long it takes to establish a bare TCP connection to a proxy. The
connection is closed right away without sending any protocol data, so the
measurement approximates one network round trip to the proxy.
"""

from __future__ import annotations

import asyncio
import logging
import time

from proxybench.errors import ConnectError
from proxybench.proxy.types import ProxyEndpoint

logger = logging.getLogger(__name__)


class LatencyProbe:
    """Times TCP connects to proxy endpoints.

    Args:
        timeout_seconds: Upper bound for a single connect attempt.
    """

    def __init__(self, timeout_seconds: float) -> None:
        self._timeout_seconds = timeout_seconds

    async def ping(self, proxy: ProxyEndpoint) -> int:
        """Return the connect duration to *proxy* in whole milliseconds.

        Raises ``ConnectError`` if the connection cannot be established within
        the timeout.
        """
        start = time.perf_counter()
        try:
            _reader, writer = await asyncio.wait_for(
                asyncio.open_connection(proxy.host, proxy.port),
                timeout=self._timeout_seconds,
            )
        except (OSError, UnicodeError, asyncio.TimeoutError) as exc:
            raise ConnectError(proxy.address, exc) from exc
        elapsed_ms = int((time.perf_counter() - start) * 1000)

        writer.close()
        try:
            await writer.wait_closed()
        except OSError as exc:
            logger.debug("Error closing probe connection to %s: %s", proxy.address, exc)

        return elapsed_ms
