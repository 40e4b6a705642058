"""Command line entry point.

Startup: load settings, configure logging, load the benchmark configuration.
Run: execute all benchmark phases.
Shutdown: write the full report and the short summary.
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from proxybench.benchmark.engine import BenchmarkEngine
from proxybench.config.benchmark import load_config
from proxybench.config.settings import BenchSettings
from proxybench.errors import ConfigError, ProxyBenchError
from proxybench.logging_config import configure_logging
from proxybench.reporting.reporter import (
    generate_report,
    generate_short_summary,
    save_report,
    save_short_summary,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proxybench",
        description="Benchmark HTTP/HTTPS and SOCKS5 proxies.",
    )
    parser.add_argument("--config", help="Path to the configuration file (JSON or YAML)")
    parser.add_argument("--report", help="Where to write the full report")
    parser.add_argument("--summary", help="Where to write the short summary")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser


def resolve_settings(args: argparse.Namespace) -> BenchSettings:
    """Environment settings, with command line flags taking precedence."""
    overrides = {
        "config_path": args.config,
        "report_path": args.report,
        "summary_path": args.summary,
        "log_level": args.log_level,
    }
    return BenchSettings(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = resolve_settings(args)
    configure_logging(settings.log_level)

    try:
        config = load_config(settings.config_path)
    except ConfigError as exc:
        logger.error("Failed to load configuration: %s", exc.message)
        return 1

    if settings.proxies:
        logger.info("Using %d proxies from PROXYBENCH_PROXIES", len(settings.proxies))
        config = config.model_copy(update={"proxies": list(settings.proxies)})

    engine = BenchmarkEngine(config)
    try:
        results = asyncio.run(engine.run())
    except ProxyBenchError as exc:
        logger.error("Benchmark failed: %s", exc.message)
        return 1

    save_report(generate_report(results), settings.report_path)
    save_short_summary(generate_short_summary(results), settings.summary_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
