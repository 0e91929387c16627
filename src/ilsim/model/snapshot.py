"""Snapshots published to observers after every scan."""

from __future__ import annotations

from pydantic import BaseModel

from .hardware import InputType
from .runtime import RunMode


class MemorySnapshot(BaseModel):
    """The ``(id, currentValue, counter, maxTimer, endTimer)`` tuple plus type tags."""

    id: str
    current_value: bool
    counter: int
    max_timer: int
    end_timer: bool
    timer_type: str | None = None
    counter_type: str | None = None


class ErrorRecord(BaseModel):
    kind: str
    message: str
    line: int | None = None


class ScanReport(BaseModel):
    """Outcome of one scan step."""

    scan: int
    executed: int = 0
    errors: list[ErrorRecord] = []

    @property
    def ok(self) -> bool:
        return not self.errors


class PLCSnapshot(BaseModel):
    mode: RunMode
    scan_count: int
    clock_ms: int
    inputs: dict[str, bool]
    input_types: dict[str, InputType]
    outputs: dict[str, bool]
    memory: list[MemorySnapshot] = []
    errors: list[ErrorRecord] = []
