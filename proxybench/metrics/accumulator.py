"""Per-proxy metrics accumulator.

Each proxy gets exactly one ``ProxyMetrics`` instance for a run. It stores the
raw millisecond samples for three series (request, ping, derived processing
time) plus request counters, and later the statistics computed over each
series.

Invariants:
- ``successful + failed == total``
- ``len(request_times()) == successful``; failed requests add no sample
- A failed ping is recorded as a ``0`` sample by the caller

Every read and write is serialized by a per-instance lock, so a reader never
sees a series halfway through an append.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from proxybench.config.benchmark import StatisticsConfig
from proxybench.metrics.statistics import Statistics, compute_statistics


@dataclass(frozen=True)
class RequestCounts:
    """Snapshot of request counters."""

    total: int
    successful: int
    failed: int


class ProxyMetrics:
    """Thread-safe sample store for a single proxy.

    Args:
        proxy: Identity string of the proxy these metrics belong to.
    """

    def __init__(self, proxy: str) -> None:
        self.proxy = proxy
        self._lock = threading.Lock()

        self._total = 0
        self._successful = 0
        self._failed = 0
        self._request_times: list[int] = []
        self._ping_times: list[int] = []
        self._derived_times: list[int] = []

        self._request_stats: Statistics | None = None
        self._ping_stats: Statistics | None = None
        self._derived_stats: Statistics | None = None

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_request(self, duration_ms: int, success: bool) -> None:
        """Count a request; only successful ones contribute a sample."""
        with self._lock:
            self._total += 1
            if success:
                self._successful += 1
                self._request_times.append(duration_ms)
            else:
                self._failed += 1

    def record_ping(self, duration_ms: int) -> None:
        with self._lock:
            self._ping_times.append(duration_ms)

    def record_derived(self, duration_ms: int) -> None:
        with self._lock:
            self._derived_times.append(duration_ms)

    # ------------------------------------------------------------------
    # Reading (copies)
    # ------------------------------------------------------------------

    def request_times(self) -> list[int]:
        with self._lock:
            return list(self._request_times)

    def ping_times(self) -> list[int]:
        with self._lock:
            return list(self._ping_times)

    def derived_times(self) -> list[int]:
        with self._lock:
            return list(self._derived_times)

    def counts(self) -> RequestCounts:
        with self._lock:
            return RequestCounts(
                total=self._total,
                successful=self._successful,
                failed=self._failed,
            )

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def compute_statistics(self, config: StatisticsConfig) -> None:
        """Compute and attach statistics for all three series."""
        request_stats = compute_statistics(self.request_times(), config)
        ping_stats = compute_statistics(self.ping_times(), config)
        derived_stats = compute_statistics(self.derived_times(), config)

        with self._lock:
            self._request_stats = request_stats
            self._ping_stats = ping_stats
            self._derived_stats = derived_stats

    @property
    def request_statistics(self) -> Statistics | None:
        with self._lock:
            return self._request_stats

    @property
    def ping_statistics(self) -> Statistics | None:
        with self._lock:
            return self._ping_stats

    @property
    def derived_statistics(self) -> Statistics | None:
        with self._lock:
            return self._derived_stats

    def __repr__(self) -> str:
        counts = self.counts()
        return (
            f"ProxyMetrics(total={counts.total}, successful={counts.successful}, "
            f"failed={counts.failed})"
        )
