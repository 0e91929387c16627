"""Run-mode and scan configuration."""

from __future__ import annotations

import tomllib
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, model_validator


class RunMode(str, Enum):
    IDLE = "IDLE"
    STOPPED = "STOPPED"
    RUNNING = "RUNNING"


class PLCConfig(BaseModel):
    scan_period_ms: int = 100
    timer_period_ms: int = 100
    input_bytes: int = 2
    output_bytes: int = 2
    reset_outputs_each_scan: bool = False

    @model_validator(mode="after")
    def _validate_periods(self):
        if self.scan_period_ms <= 0:
            raise ValueError("scan_period_ms must be positive")
        if self.timer_period_ms <= 0:
            raise ValueError("timer_period_ms must be positive")
        if self.input_bytes < 1 or self.output_bytes < 1:
            raise ValueError("input_bytes and output_bytes must be at least 1")
        return self


def load_config(path: str | Path) -> PLCConfig:
    """Read a TOML file into a ``PLCConfig``.

    Settings may live under a ``[plc]`` table or at the top level.
    """
    with Path(path).open("rb") as f:
        data = tomllib.load(f)
    return PLCConfig(**data.get("plc", data))
