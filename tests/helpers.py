"""Fakes for the network boundary, config builders and hypothesis strategies."""

from __future__ import annotations

import asyncio

from hypothesis import strategies as st

from proxybench.config.benchmark import (
    BenchmarkConfig,
    BenchmarkFileConfig,
    ResponseValidationConfig,
    StatisticsConfig,
)
from proxybench.errors import ConnectError, RequestError
from proxybench.proxy.types import ProxyEndpoint

GOOD_PROXY = "http:good.example:8080:alice:s3cret:enabled"
BAD_PROXY = "socks:bad.example:1080:bob:hunter2:enabled"


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeTransport:
    """Request transport returning a fixed body, failing, or stalling."""

    def __init__(
        self,
        body: bytes = b'{"ok": true}',
        fail: bool = False,
        delay: float = 0.0,
        events: list | None = None,
        name: str = "",
    ) -> None:
        self.body = body
        self.fail = fail
        self.delay = delay
        self.events = events if events is not None else []
        self.name = name
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def perform_request(self, url: str) -> bytes:
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.events.append(("request", self.name))
        try:
            await asyncio.sleep(self.delay)
            if self.fail:
                raise RequestError("connection reset by proxy")
            return self.body
        finally:
            self.in_flight -= 1

    async def aclose(self) -> None:
        self.closed = True


class FakeProbe:
    """Latency probe returning fixed durations per host, or failing."""

    def __init__(
        self,
        durations: dict[str, int] | None = None,
        failing_hosts: set[str] | None = None,
        events: list | None = None,
    ) -> None:
        self.durations = durations or {}
        self.failing_hosts = failing_hosts or set()
        self.events = events if events is not None else []

    async def ping(self, proxy: ProxyEndpoint) -> int:
        self.events.append(("ping", proxy.host))
        await asyncio.sleep(0)
        if proxy.host in self.failing_hosts:
            raise ConnectError(proxy.address, OSError("connection refused"))
        return self.durations.get(proxy.host, 10)


def make_factory(transports: dict[str, FakeTransport]):
    """Transport factory handing out pre-built fakes keyed by proxy host."""

    def factory(proxy: ProxyEndpoint, timeout_seconds: float) -> FakeTransport:
        return transports[proxy.host]

    return factory


# ---------------------------------------------------------------------------
# Config builders
# ---------------------------------------------------------------------------


def make_config(
    proxies: list[str],
    requests: int = 5,
    warmup_requests: int = 1,
    timeout_ms: int = 2000,
    validation: ResponseValidationConfig | None = None,
    statistics: StatisticsConfig | None = None,
    target_url: str = "https://httpbin.org/get",
) -> BenchmarkFileConfig:
    return BenchmarkFileConfig(
        proxies=proxies,
        benchmark=BenchmarkConfig(
            requests=requests,
            interval_ms=1,
            warmup_requests=warmup_requests,
            target_url=target_url,
            timeout_ms=timeout_ms,
            response_validation=validation,
        ),
        statistics=statistics or StatisticsConfig(percentiles=[90, 95, 99], mean=True, median=True),
    )


# ---------------------------------------------------------------------------
# Hypothesis strategies
# ---------------------------------------------------------------------------

# Millisecond samples
durations_ms = st.integers(min_value=0, max_value=60_000)
sample_series = st.lists(durations_ms, min_size=1, max_size=200)

# Percentiles strictly inside (0, 100)
percentile_values = st.floats(
    min_value=0.1, max_value=99.9, allow_nan=False, allow_infinity=False
)

# Request outcomes: (duration_ms, success)
request_outcomes = st.lists(st.tuples(durations_ms, st.booleans()), max_size=100)

# JSON object keys usable as path segments (no dots)
json_keys = st.from_regex(r"[a-zA-Z_][a-zA-Z0-9_]{0,8}", fullmatch=True)
