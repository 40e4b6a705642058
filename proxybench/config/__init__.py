"""Configuration module: runtime settings and benchmark configuration."""

from proxybench.config.benchmark import (
    BenchmarkConfig,
    BenchmarkFileConfig,
    CheckType,
    ResponseValidationConfig,
    StatisticsConfig,
    ValidationCheck,
    load_config,
)
from proxybench.config.settings import BenchSettings

__all__ = [
    "BenchSettings",
    "BenchmarkConfig",
    "BenchmarkFileConfig",
    "CheckType",
    "ResponseValidationConfig",
    "StatisticsConfig",
    "ValidationCheck",
    "load_config",
]
