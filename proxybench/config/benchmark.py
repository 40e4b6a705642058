"""Benchmark configuration models and file loader.

The configuration file is JSON or YAML (YAML is a superset of JSON, so both
are read with ``yaml.safe_load``) and is parsed into typed Pydantic models.
Numeric benchmark settings left at zero or omitted take the tool defaults.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import pydantic
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from proxybench.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_TARGET_URL = "https://httpbin.org/get"

_BENCHMARK_DEFAULTS: dict[str, int | str] = {
    "requests": 100,
    "interval_ms": 5000,
    "warmup_requests": 10,
    "target_url": DEFAULT_TARGET_URL,
    "concurrency": 10,
    "timeout_ms": 30000,
}


class CheckType(str, Enum):
    """Value shapes a validation check can assert."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class ValidationCheck(BaseModel):
    """A single path/type/value assertion on a JSON response."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1)
    type: CheckType
    value: bool | int | float | str | None = None

    @model_validator(mode="after")
    def _value_matches_type(self) -> ValidationCheck:
        if self.value is None:
            return self
        if self.type is CheckType.BOOLEAN and not isinstance(self.value, bool):
            raise ValueError(f"expected value for '{self.path}' must be a boolean")
        if self.type is CheckType.NUMBER and (
            isinstance(self.value, bool) or not isinstance(self.value, (int, float))
        ):
            raise ValueError(f"expected value for '{self.path}' must be a number")
        if self.type is CheckType.STRING and not isinstance(self.value, str):
            raise ValueError(f"expected value for '{self.path}' must be a string")
        return self


class ResponseValidationConfig(BaseModel):
    """Response validation block: a switch plus an ordered list of checks."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    checks: list[ValidationCheck] = []


class BenchmarkConfig(BaseModel):
    """Request counts, pacing and target for a benchmark run."""

    requests: int = Field(default=100, ge=0)
    interval_ms: int = Field(default=5000, ge=0)
    warmup_requests: int = Field(default=10, ge=0)
    target_url: str = DEFAULT_TARGET_URL
    concurrency: int = Field(default=10, ge=0)  # read but not applied, see DESIGN.md
    timeout_ms: int = Field(default=30000, ge=0)
    response_validation: ResponseValidationConfig | None = None

    @model_validator(mode="after")
    def _fill_zero_values(self) -> BenchmarkConfig:
        # Zero or empty means "not set"
        for name, default in _BENCHMARK_DEFAULTS.items():
            if not getattr(self, name):
                setattr(self, name, default)
        return self

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def interval_seconds(self) -> float:
        return self.interval_ms / 1000


class StatisticsConfig(BaseModel):
    """Which optional statistics to compute. Shared read-only across a run."""

    model_config = ConfigDict(frozen=True)

    percentiles: list[float] = []
    mean: bool = False
    median: bool = False

    @field_validator("percentiles")
    @classmethod
    def _percentiles_in_range(cls, value: list[float]) -> list[float]:
        for p in value:
            if not 0 < p < 100:
                raise ValueError(f"percentile {p} must be between 0 and 100 (exclusive)")
        return value


class BenchmarkFileConfig(BaseModel):
    """Top-level configuration document."""

    proxies: list[str] = []
    benchmark: BenchmarkConfig = Field(default_factory=BenchmarkConfig)
    statistics: StatisticsConfig = Field(default_factory=StatisticsConfig)


def load_config(config_path: str) -> BenchmarkFileConfig:
    """Parse a benchmark configuration file into a ``BenchmarkFileConfig``.

    Args:
        config_path: Path to a JSON or YAML configuration file.

    Raises:
        ConfigError: If the file is missing, unreadable, not a mapping, or
            fails model validation.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"configuration file not found: {config_path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"failed to read configuration {config_path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"configuration {config_path} must be a mapping at the top level")

    try:
        config = BenchmarkFileConfig.model_validate(raw)
    except pydantic.ValidationError as exc:
        raise ConfigError(f"invalid configuration in {config_path}: {exc}") from exc

    logger.info(
        "Loaded configuration from %s with %d proxies",
        config_path,
        len(config.proxies),
    )
    return config
