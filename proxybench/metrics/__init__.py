"""Metrics accumulation and statistics."""

from proxybench.metrics.accumulator import ProxyMetrics, RequestCounts
from proxybench.metrics.statistics import Statistics, compute_statistics, percentile

__all__ = [
    "ProxyMetrics",
    "RequestCounts",
    "Statistics",
    "compute_statistics",
    "percentile",
]
