"""Report generation for finished benchmark runs."""

from proxybench.reporting.reporter import (
    BenchmarkReport,
    ProxyReport,
    ShortSummary,
    generate_report,
    generate_short_summary,
    rank_proxies,
    save_report,
    save_short_summary,
)

__all__ = [
    "BenchmarkReport",
    "ProxyReport",
    "ShortSummary",
    "generate_report",
    "generate_short_summary",
    "rank_proxies",
    "save_report",
    "save_short_summary",
]
