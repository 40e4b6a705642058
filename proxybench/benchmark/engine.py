"""Benchmark engine: drives the phased measurement lifecycle.

Lifecycle (global across all proxies, strictly sequential):

    IDLE → WARMUP → PINGING → REQUEST_BENCHMARKING → DERIVING_METRICS
         → COMPUTING_STATISTICS → DONE

FAILED is entered when there are no valid proxies or a phase hits a hard
error (e.g. no transport registered for a protocol); the remaining phases are
skipped.

Warmup, ping and request phases start one worker coroutine per proxy and wait
for all of them before moving on. Inside a worker, iterations run one after
another with the configured interval slept between them. Per-iteration
failures are counted and never abort the run.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Protocol

from proxybench.config.benchmark import BenchmarkFileConfig
from proxybench.errors import (
    BenchmarkPhaseError,
    BenchmarkStateError,
    ConfigError,
    ConnectError,
    NoValidProxiesError,
    ProxyBenchError,
    TransportSetupError,
)
from proxybench.metrics.accumulator import ProxyMetrics
from proxybench.proxy.ping import LatencyProbe
from proxybench.proxy.transport import RequestTransport, create_transport
from proxybench.proxy.types import ProxyEndpoint, parse_proxy
from proxybench.validation.validator import ResponseValidator

logger = logging.getLogger(__name__)

TransportFactory = Callable[[ProxyEndpoint, float], RequestTransport]


class Probe(Protocol):
    async def ping(self, proxy: ProxyEndpoint) -> int: ...


class BenchmarkState(str, Enum):
    """Benchmark lifecycle states."""

    IDLE = "idle"
    WARMUP = "warmup"
    PINGING = "pinging"
    REQUEST_BENCHMARKING = "request_benchmarking"
    DERIVING_METRICS = "deriving_metrics"
    COMPUTING_STATISTICS = "computing_statistics"
    DONE = "done"
    FAILED = "failed"


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def derive_processing_times(request_times: list[int], ping_times: list[int]) -> list[int]:
    """Estimate proxy-side processing time for each index-aligned sample pair.

    ``processing[i] = max(0, request[i] - 2 * ping[i])``; the longer series is
    truncated to the shorter one.
    """
    return [max(0, request - 2 * ping) for request, ping in zip(request_times, ping_times)]


class BenchmarkEngine:
    """Runs a full benchmark over every enabled proxy in *config*.

    Network access is injected so the engine can run against fakes:

    Args:
        config: Parsed benchmark configuration.
        transport_factory: Builds a request transport for a proxy and a
            timeout in seconds. Defaults to ``create_transport``.
        probe: Latency probe used in the ping phase. Defaults to a
            ``LatencyProbe`` bounded by the configured timeout.
    """

    def __init__(
        self,
        config: BenchmarkFileConfig,
        *,
        transport_factory: TransportFactory = create_transport,
        probe: Probe | None = None,
    ) -> None:
        self._config = config
        self._benchmark = config.benchmark
        self._transport_factory = transport_factory
        self._probe = probe or LatencyProbe(self._benchmark.timeout_seconds)
        self._validator = ResponseValidator(self._benchmark.response_validation)

        self._state = BenchmarkState.IDLE
        self._proxies = self._load_proxies(config.proxies)
        self._metrics: dict[str, ProxyMetrics] = {}
        self._transports: dict[str, RequestTransport | TransportSetupError] = {}

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    @staticmethod
    def _load_proxies(raw_proxies: list[str]) -> list[ProxyEndpoint]:
        """Parse proxy strings, skipping malformed, disabled and duplicate ones."""
        proxies: list[ProxyEndpoint] = []
        seen: set[str] = set()

        for index, raw in enumerate(raw_proxies):
            try:
                proxy = parse_proxy(raw)
            except ConfigError as exc:
                logger.warning("Skipping invalid proxy #%d: %s", index, exc.message)
                continue

            if not proxy.enabled:
                logger.info("Skipping disabled proxy %s", proxy.address)
                continue
            if proxy.identity in seen:
                logger.warning("Skipping duplicate proxy %s", proxy.address)
                continue

            seen.add(proxy.identity)
            proxies.append(proxy)

        return proxies

    @property
    def state(self) -> BenchmarkState:
        return self._state

    @property
    def proxies(self) -> list[ProxyEndpoint]:
        return list(self._proxies)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self) -> dict[str, ProxyMetrics]:
        """Execute every phase and return the finalized metrics map.

        Raises ``NoValidProxiesError`` when nothing can be benchmarked and
        ``BenchmarkPhaseError`` when a phase fails hard. Any error raised after
        the proxies are loaded leaves the engine in ``FAILED``.
        """
        if self._state is not BenchmarkState.IDLE:
            raise BenchmarkStateError(f"cannot run benchmark in state {self._state.value}")

        if not self._proxies:
            self._state = BenchmarkState.FAILED
            raise NoValidProxiesError()

        logger.info("Starting proxy benchmark with %d proxies", len(self._proxies))
        logger.info(
            "Concurrency setting %d is not applied; each phase runs one worker per proxy",
            self._benchmark.concurrency,
        )

        self._metrics = {proxy.identity: ProxyMetrics(proxy.identity) for proxy in self._proxies}

        try:
            self._enter(BenchmarkState.WARMUP)
            self._open_transports()
            await self._run_phase(self._warmup_worker)

            self._enter(BenchmarkState.PINGING)
            await self._run_phase(self._ping_worker)

            self._enter(BenchmarkState.REQUEST_BENCHMARKING)
            await self._run_phase(self._request_worker)

            self._enter(BenchmarkState.DERIVING_METRICS)
            self._derive_metrics()

            self._enter(BenchmarkState.COMPUTING_STATISTICS)
            for metrics in self._metrics.values():
                metrics.compute_statistics(self._config.statistics)
        except BenchmarkPhaseError as exc:
            logger.error("Benchmark aborted during %s: %s", self._state.value, exc.message)
            self._state = BenchmarkState.FAILED
            raise
        except Exception:
            logger.exception("Benchmark aborted during %s", self._state.value)
            self._state = BenchmarkState.FAILED
            raise
        finally:
            await self._close_transports()

        self._enter(BenchmarkState.DONE)
        logger.info("Benchmark completed successfully")
        return self.results()

    def results(self) -> dict[str, ProxyMetrics]:
        """Return the finalized metrics map, keyed by proxy identity."""
        if self._state is not BenchmarkState.DONE:
            raise BenchmarkStateError(f"results are not available in state {self._state.value}")
        return dict(self._metrics)

    # ------------------------------------------------------------------
    # Phase plumbing
    # ------------------------------------------------------------------

    def _enter(self, state: BenchmarkState) -> None:
        logger.info("Entering phase %s", state.value, extra={"phase": state.value})
        self._state = state

    async def _run_phase(self, worker: Callable[[ProxyEndpoint], Awaitable[None]]) -> None:
        """Run *worker* for every proxy concurrently and wait for all of them."""
        outcomes = await asyncio.gather(
            *(worker(proxy) for proxy in self._proxies),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, BenchmarkPhaseError):
                raise outcome
            if isinstance(outcome, Exception):
                raise BenchmarkPhaseError(
                    f"{self._state.value} phase failed: {outcome!r}",
                    phase=self._state.value,
                ) from outcome

    def _open_transports(self) -> None:
        """Build one transport per proxy.

        Setup failures are kept and counted per iteration later; an
        ``UnsupportedProtocolError`` propagates and fails the run.
        """
        self._transports = {}
        for proxy in self._proxies:
            try:
                transport = self._transport_factory(proxy, self._benchmark.timeout_seconds)
            except TransportSetupError as exc:
                logger.warning(
                    "Failed to create client for proxy %s: %s",
                    proxy.address,
                    exc.message,
                    extra={"proxy": proxy.address, "error_reason": exc.message},
                )
                self._transports[proxy.identity] = exc
            else:
                self._transports[proxy.identity] = transport

    async def _close_transports(self) -> None:
        for identity, transport in self._transports.items():
            if isinstance(transport, TransportSetupError):
                continue
            try:
                await transport.aclose()
            except Exception as exc:  # noqa: BLE001
                logger.debug("Error closing transport for %s: %s", identity, exc)
        self._transports = {}

    async def _fetch(self, transport: RequestTransport) -> None:
        """One GET bounded by the request timeout, validated when enabled."""
        body = await asyncio.wait_for(
            transport.perform_request(self._benchmark.target_url),
            timeout=self._benchmark.timeout_seconds,
        )
        self._validator.validate(body)

    # ------------------------------------------------------------------
    # Workers
    # ------------------------------------------------------------------

    async def _warmup_worker(self, proxy: ProxyEndpoint) -> None:
        transport = self._transports[proxy.identity]
        if isinstance(transport, TransportSetupError):
            return

        logger.info("Running warmup for proxy %s", proxy.address, extra={"proxy": proxy.address})
        for iteration in range(self._benchmark.warmup_requests):
            try:
                await self._fetch(transport)
            except asyncio.TimeoutError:
                logger.warning(
                    "Warmup request timed out for proxy %s",
                    proxy.address,
                    extra={"proxy": proxy.address, "iteration": iteration},
                )
            except ProxyBenchError as exc:
                logger.warning(
                    "Warmup request failed for proxy %s: %s",
                    proxy.address,
                    exc.message,
                    extra={"proxy": proxy.address, "iteration": iteration, "error_reason": exc.message},
                )

    async def _ping_worker(self, proxy: ProxyEndpoint) -> None:
        metrics = self._metrics[proxy.identity]

        logger.info("Running ping measurement for proxy %s", proxy.address, extra={"proxy": proxy.address})
        for iteration in range(self._benchmark.requests):
            if iteration > 0:
                await asyncio.sleep(self._benchmark.interval_seconds)

            try:
                duration_ms = await self._probe.ping(proxy)
            except ConnectError as exc:
                logger.warning(
                    "Ping failed for proxy %s: %s",
                    proxy.address,
                    exc.message,
                    extra={"proxy": proxy.address, "iteration": iteration, "error_reason": exc.message},
                )
                duration_ms = 0
            metrics.record_ping(duration_ms)

    async def _request_worker(self, proxy: ProxyEndpoint) -> None:
        metrics = self._metrics[proxy.identity]
        transport = self._transports[proxy.identity]

        logger.info("Running request benchmarking for proxy %s", proxy.address, extra={"proxy": proxy.address})
        for iteration in range(self._benchmark.requests):
            if iteration > 0:
                await asyncio.sleep(self._benchmark.interval_seconds)

            if isinstance(transport, TransportSetupError):
                metrics.record_request(0, False)
                continue

            start = time.perf_counter()
            error_reason: str | None = None
            try:
                await self._fetch(transport)
            except asyncio.TimeoutError:
                error_reason = f"timed out after {self._benchmark.timeout_ms}ms"
            except ProxyBenchError as exc:
                error_reason = exc.message
            duration_ms = _elapsed_ms(start)

            if error_reason is None:
                metrics.record_request(duration_ms, True)
                logger.debug(
                    "Request succeeded for proxy %s",
                    proxy.address,
                    extra={"proxy": proxy.address, "iteration": iteration, "duration_ms": duration_ms},
                )
            else:
                metrics.record_request(duration_ms, False)
                logger.warning(
                    "Request failed for proxy %s: %s",
                    proxy.address,
                    error_reason,
                    extra={
                        "proxy": proxy.address,
                        "iteration": iteration,
                        "duration_ms": duration_ms,
                        "error_reason": error_reason,
                    },
                )

    # ------------------------------------------------------------------
    # Derived metrics
    # ------------------------------------------------------------------

    def _derive_metrics(self) -> None:
        for metrics in self._metrics.values():
            derived = derive_processing_times(metrics.request_times(), metrics.ping_times())
            for value in derived:
                metrics.record_derived(value)
