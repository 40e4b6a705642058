"""Benchmark report generation.

Turns the finalized per-proxy metrics into two JSON documents:

- the full report: counters, raw series and statistics for every proxy
- the short summary: proxy identity → mean derived processing time

Proxies are ranked by mean derived processing time, fastest first. Proxies
without a derived mean (no successful requests, or mean not configured) come
last in identity order.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field

from proxybench.metrics.accumulator import ProxyMetrics
from proxybench.metrics.statistics import Statistics

logger = logging.getLogger(__name__)


class RequestMetricsReport(BaseModel):
    total: int
    successful: int
    failed: int
    times: list[int]
    statistics: Statistics | None = None


class PingMetricsReport(BaseModel):
    times: list[int]
    statistics: Statistics | None = None


class DerivedMetricsReport(BaseModel):
    processing_times: list[int]
    statistics: Statistics | None = None


class ProxyReport(BaseModel):
    """Everything measured for a single proxy."""

    proxy: str
    request_metrics: RequestMetricsReport
    ping_metrics: PingMetricsReport
    derived_metrics: DerivedMetricsReport


class BenchmarkReport(BaseModel):
    """Full benchmark result."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    proxies: list[ProxyReport]


class ShortSummary(BaseModel):
    """Mean derived processing time per proxy."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    proxies: dict[str, float]


def _derived_mean(metrics: ProxyMetrics) -> float | None:
    stats = metrics.derived_statistics
    return stats.mean if stats is not None else None


def _rank_key(metrics: ProxyMetrics) -> tuple[float, str]:
    mean = _derived_mean(metrics)
    return (mean if mean is not None else math.inf, metrics.proxy)


def rank_proxies(metrics: dict[str, ProxyMetrics]) -> list[ProxyMetrics]:
    """Order proxies by mean derived processing time, fastest first."""
    return sorted(metrics.values(), key=_rank_key)


def build_proxy_report(metrics: ProxyMetrics) -> ProxyReport:
    counts = metrics.counts()
    return ProxyReport(
        proxy=metrics.proxy,
        request_metrics=RequestMetricsReport(
            total=counts.total,
            successful=counts.successful,
            failed=counts.failed,
            times=metrics.request_times(),
            statistics=metrics.request_statistics,
        ),
        ping_metrics=PingMetricsReport(
            times=metrics.ping_times(),
            statistics=metrics.ping_statistics,
        ),
        derived_metrics=DerivedMetricsReport(
            processing_times=metrics.derived_times(),
            statistics=metrics.derived_statistics,
        ),
    )


def generate_report(metrics: dict[str, ProxyMetrics]) -> BenchmarkReport:
    """Build the full report from the finalized metrics map."""
    return BenchmarkReport(proxies=[build_proxy_report(m) for m in rank_proxies(metrics)])


def generate_short_summary(metrics: dict[str, ProxyMetrics]) -> ShortSummary:
    """Build the short summary; proxies without a derived mean report 0.0."""
    proxies: dict[str, float] = {}
    for m in rank_proxies(metrics):
        mean = _derived_mean(m)
        proxies[m.proxy] = mean if mean is not None else 0.0
    return ShortSummary(proxies=proxies)


def _write_json(model: BaseModel, path: str) -> None:
    Path(path).write_text(
        model.model_dump_json(indent=2, exclude_none=True) + "\n",
        encoding="utf-8",
    )


def save_report(report: BenchmarkReport, path: str) -> None:
    """Write the full report as indented JSON. Absent statistics are omitted."""
    _write_json(report, path)
    logger.info("Benchmark report saved to %s", path)


def save_short_summary(summary: ShortSummary, path: str) -> None:
    """Write the short summary as indented JSON."""
    _write_json(summary, path)
    logger.info("Short summary saved to %s", path)
