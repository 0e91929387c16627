"""Scan engine: the user-facing object for running an IL program.

Owns the process image, the executor, the run mode and the simulated
clock.  One ``step()`` is one full scan cycle.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping

from ilsim.errors import ILError, ProgramEmptyError
from ilsim.model.addresses import Domain
from ilsim.model.hardware import InputType, default_io_points
from ilsim.model.instructions import Program
from ilsim.model.runtime import PLCConfig, RunMode
from ilsim.model.snapshot import ErrorRecord, PLCSnapshot, ScanReport
from ilsim.parse import resolve_address, tokenize_program

from ._executor import InstructionExecutor
from ._image import InputBank, ProcessImage
from ._memory import MemoryVariable

logger = logging.getLogger(__name__)

SnapshotObserver = Callable[[PLCSnapshot], None]
ErrorObserver = Callable[[ILError], None]
InputSource = Callable[[], Mapping[str, bool]]


class ScanEngine:
    """Scan-cycle engine for a single IL program.

    Provides ``step()``, ``scan()``, ``tick()``, run-mode transitions and
    item-style access to addresses (``engine["Q0.0"]``, ``engine["T1"]``).

    Parameters
    ----------
    program : Program | str | Iterable[str] | None
        Program text, either as one string or as a sequence of lines.
    config : PLCConfig | None
        Scan period, timer resolution and I/O sizing.
    input_source : callable | None
        Called at the start of every scan; its mapping overrides the
        field inputs for that scan.
    """

    def __init__(
        self,
        program: Program | str | Iterable[str] | None = None,
        config: PLCConfig | None = None,
        input_source: InputSource | None = None,
    ) -> None:
        self.config = config or PLCConfig()
        points = default_io_points(self.config.input_bytes, self.config.output_bytes)
        self.image = ProcessImage.from_points(points)
        self.field = InputBank.from_points(points)
        self.executor = InstructionExecutor()
        self.program = Program()
        self.scan_count = 0
        self.clock_ms = 0
        self._mode = RunMode.IDLE
        self._input_source = input_source
        self._snapshot_observers: list[SnapshotObserver] = []
        self._error_observers: list[ErrorObserver] = []
        self._last_errors: list[ErrorRecord] = []

        if program is not None:
            self.load_program(program)

    def load_program(self, program: Program | str | Iterable[str]) -> None:
        if isinstance(program, Program):
            self.program = Program(lines=program.lines)
        elif isinstance(program, str):
            self.program = Program.from_text(program)
        else:
            self.program = Program(lines=list(program))
        logger.info("Loaded program with %d lines", len(self.program))

    # -----------------------------------------------------------------------
    # Observers
    # -----------------------------------------------------------------------

    def subscribe(self, observer: SnapshotObserver) -> None:
        self._snapshot_observers.append(observer)

    def on_error(self, observer: ErrorObserver) -> None:
        self._error_observers.append(observer)

    def _publish(self) -> None:
        if not self._snapshot_observers:
            return
        snapshot = self.snapshot()
        for observer in self._snapshot_observers:
            observer(snapshot)

    def _report(self, error: ILError, errors: list[ErrorRecord]) -> None:
        logger.error("%s error: %s", error.kind, error)
        errors.append(ErrorRecord(kind=error.kind, message=str(error), line=error.line))
        if self._mode is not RunMode.IDLE:
            self._set_mode(RunMode.IDLE)
        for observer in self._error_observers:
            observer(error)

    # -----------------------------------------------------------------------
    # Run mode
    # -----------------------------------------------------------------------

    @property
    def mode(self) -> RunMode:
        return self._mode

    @property
    def running(self) -> bool:
        return self._mode is RunMode.RUNNING

    def _set_mode(self, mode: RunMode) -> None:
        if mode is not self._mode:
            logger.info("Run mode %s -> %s", self._mode.value, mode.value)
        self._mode = mode
        if mode is not RunMode.RUNNING:
            for timer in self.image.timers():
                timer.halt()

    def run(self) -> None:
        self._last_errors = []
        self._set_mode(RunMode.RUNNING)

    def pause(self) -> None:
        """Leave RUNNING for STOPPED; timers halt but keep their counts."""
        self._set_mode(RunMode.STOPPED)

    def stop(self) -> None:
        """Leave RUNNING for IDLE; timers halt and their counts are zeroed."""
        self._set_mode(RunMode.IDLE)
        for timer in self.image.timers():
            timer.reset_accumulator()

    def toggle(self) -> RunMode:
        if self.running:
            self.pause()
        else:
            self.run()
        return self._mode

    def refresh(self) -> bool:
        """Hard reset of outputs and memory; ignored while RUNNING."""
        if self.running:
            logger.warning("Refresh ignored while RUNNING")
            return False
        self.image.hard_reset()
        logger.info("Hard reset: outputs and memory cleared")
        self._publish()
        return True

    # -----------------------------------------------------------------------
    # Inputs
    # -----------------------------------------------------------------------

    def press(self, address: str) -> bool:
        return self.field.press(address)

    def release(self, address: str) -> bool:
        return self.field.release(address)

    def set_input(self, address: str, value: bool) -> None:
        self.field.set(address, value)

    def set_input_type(self, address: str, input_type: InputType | str) -> None:
        self.field.set_type(address, InputType(input_type))

    def _refresh_inputs(self) -> None:
        self.image.inputs.update(self.field.read())
        if self._input_source is not None:
            for address, value in self._input_source().items():
                key = address.upper()
                if key in self.image.inputs:
                    self.image.inputs[key] = bool(value)
                else:
                    logger.warning("Input source supplied unknown address %s", address)

    # -----------------------------------------------------------------------
    # Scan / tick
    # -----------------------------------------------------------------------

    def step(self) -> ScanReport | None:
        """Execute one scan cycle if RUNNING.

        1. Refresh the input table from the field inputs
        2. Reset the accumulator
        3. Tokenise and execute every line, collecting per-line errors
        4. Reconcile timers, then advance them one scan period
        5. Publish the snapshot
        """
        if not self.running:
            logger.debug("Scan skipped in %s mode", self._mode.value)
            return None

        errors: list[ErrorRecord] = []
        executed = 0

        self._refresh_inputs()
        self.executor.reset()
        if self.config.reset_outputs_each_scan:
            self.image.reset_outputs()

        try:
            instructions = tokenize_program(self.program)
        except ProgramEmptyError as exc:
            self._report(exc, errors)
            instructions = []

        for instruction in instructions:
            try:
                self.executor.execute(instruction, self.image)
            except ILError as exc:
                self._report(exc, errors)
                continue
            executed += 1

        for timer in self.image.timers():
            timer.reconcile()
        if self.running:
            for timer in self.image.timers():
                timer.advance(self.config.scan_period_ms, self.config.timer_period_ms)
        else:
            for timer in self.image.timers():
                timer.halt()

        self.scan_count += 1
        self.clock_ms += self.config.scan_period_ms
        self._last_errors = errors
        logger.debug("Scan %d: %d instructions, %d errors", self.scan_count, executed, len(errors))

        self._publish()
        return ScanReport(scan=self.scan_count, executed=executed, errors=errors)

    def scan(self, n: int = 1) -> list[ScanReport]:
        """Execute up to *n* scan cycles, stopping early if the mode leaves RUNNING."""
        reports: list[ScanReport] = []
        for _ in range(n):
            report = self.step()
            if report is None:
                break
            reports.append(report)
        return reports

    def tick(self, seconds: float = 0, ms: float = 0) -> list[ScanReport]:
        """Advance simulated time by running ``ceil(total_ms / scan_period_ms)`` scans."""
        total_ms = seconds * 1000 + ms
        if total_ms <= 0:
            return []
        return self.scan(math.ceil(total_ms / self.config.scan_period_ms))

    # -----------------------------------------------------------------------
    # Inspection
    # -----------------------------------------------------------------------

    @property
    def accumulator(self) -> bool | None:
        return self.executor.accumulator

    @property
    def inputs(self) -> dict[str, bool]:
        return self.image.inputs

    @property
    def outputs(self) -> dict[str, bool]:
        return self.image.outputs

    @property
    def memory(self) -> dict[str, MemoryVariable]:
        return self.image.memory

    @property
    def last_errors(self) -> list[ErrorRecord]:
        return list(self._last_errors)

    def snapshot(self) -> PLCSnapshot:
        return PLCSnapshot(
            mode=self._mode,
            scan_count=self.scan_count,
            clock_ms=self.clock_ms,
            inputs=dict(self.image.inputs),
            input_types=dict(self.field.types),
            outputs=dict(self.image.outputs),
            memory=[v.snapshot() for v in self.image.memory.values()],
            errors=list(self._last_errors),
        )

    def __getitem__(self, address: str) -> bool | MemoryVariable:
        resolved = resolve_address(address)
        if resolved.domain.is_io:
            return self.image.read(resolved)
        return self.image.memory_variable(resolved)

    def __setitem__(self, address: str, value: bool) -> None:
        resolved = resolve_address(address)
        if resolved.domain is not Domain.INPUT:
            raise KeyError(f"only field inputs can be assigned, got {address!r}")
        self.set_input(resolved.text, value)

    def __contains__(self, address: str) -> bool:
        key = address.upper()
        return key in self.image.inputs or key in self.image.outputs or key in self.image.memory
