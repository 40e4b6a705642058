"""Pydantic Settings for the proxybench command line tool.

All environment variables use the PROXYBENCH_ prefix.
Example: PROXYBENCH_CONFIG_PATH=bench.yaml, PROXYBENCH_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

import json
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode


class BenchSettings(BaseSettings):
    """Runtime settings validated from environment variables."""

    config_path: str = "config.json"
    log_level: str = "INFO"

    # Output files
    report_path: str = "result.json"
    summary_path: str = "results_short.json"

    # When set, replaces the proxy list from the configuration file.
    # Comma-separated or a JSON list:
    # PROXYBENCH_PROXIES='http:p1:8080:u:p:enabled, socks:p2:1080:u:p:enabled'
    proxies: Annotated[list[str], NoDecode] = []

    model_config = {"env_prefix": "PROXYBENCH_"}

    @field_validator("proxies", mode="before")
    @classmethod
    def _split_proxies(cls, value: object) -> object:
        if not isinstance(value, str):
            return value
        raw = value.strip()
        if raw.startswith("["):
            return json.loads(raw)
        return [item.strip() for item in raw.split(",") if item.strip()]
