"""Shared test fixtures for the proxybench test suite."""

from __future__ import annotations

import os

import pytest

from helpers import BAD_PROXY, GOOD_PROXY, make_config
from proxybench.config.benchmark import BenchmarkFileConfig, StatisticsConfig


# ---------------------------------------------------------------------------
# Keep PROXYBENCH_ env vars from the host out of the tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clear_bench_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("PROXYBENCH_"):
            monkeypatch.delenv(key)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def stats_config() -> StatisticsConfig:
    return StatisticsConfig(percentiles=[50, 90, 95, 99], mean=True, median=True)


@pytest.fixture
def two_proxy_config() -> BenchmarkFileConfig:
    """One proxy that always answers and one that always fails."""
    return make_config([GOOD_PROXY, BAD_PROXY])
