"""ilsim simulator: scan-cycle execution of Instruction List programs.

Entry point::

    from ilsim.simulate import simulate

    plc = simulate(["LD I0.0", "TON T1,50", "LD T1", "ST Q0.0"])
    plc["I0.0"] = True
    plc.tick(seconds=6)
    assert plc["Q0.0"]
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from ilsim.model.instructions import Program
from ilsim.model.runtime import PLCConfig

from ._context import InputSource, ScanEngine
from ._driver import ScanDriver
from ._executor import InstructionExecutor
from ._image import InputBank, ProcessImage
from ._memory import CounterType, MemoryVariable, TimerState, TimerType


def simulate(
    program: Program | str | Iterable[str] | Path,
    *,
    config: PLCConfig | None = None,
    scan_period_ms: int | None = None,
    timer_period_ms: int | None = None,
    input_source: InputSource | None = None,
    run: bool = True,
) -> ScanEngine:
    """Create a scan engine for an IL program.

    Parameters
    ----------
    program
        Program text, a sequence of lines, a ``Program`` or a path to a
        program file.
    config
        Base configuration; the period keywords override its fields.
    scan_period_ms, timer_period_ms
        Simulated time per scan and per timer tick.
    input_source
        Optional callable returning input values at the start of each scan.
    run
        Put the engine in RUNNING mode immediately (default True).

    Returns
    -------
    ScanEngine
    """
    if isinstance(program, Path):
        from ilsim.export.il import load_program
        program = load_program(program)

    config = config or PLCConfig()
    overrides = {}
    if scan_period_ms is not None:
        overrides["scan_period_ms"] = scan_period_ms
    if timer_period_ms is not None:
        overrides["timer_period_ms"] = timer_period_ms
    if overrides:
        config = PLCConfig(**{**config.model_dump(), **overrides})

    engine = ScanEngine(program, config=config, input_source=input_source)
    if run:
        engine.run()
    return engine


__all__ = [
    "CounterType",
    "InputBank",
    "InstructionExecutor",
    "MemoryVariable",
    "ProcessImage",
    "ScanDriver",
    "ScanEngine",
    "TimerState",
    "TimerType",
    "simulate",
]
