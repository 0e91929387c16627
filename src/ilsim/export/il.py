"""Instruction List text output and program persistence.

Renders tokenised instructions back to canonical IL text, saves and loads
program files, and formats memory variables for tabular display.
"""

from __future__ import annotations

from collections.abc import Iterable
from io import StringIO
from pathlib import Path

from ilsim.model.addresses import Domain
from ilsim.model.instructions import Instruction, Program, lookup_opcode
from ilsim.model.snapshot import PLCSnapshot
from ilsim.simulate._memory import CounterType, MemoryVariable, TimerType


# ---------------------------------------------------------------------------
# Program text
# ---------------------------------------------------------------------------

def format_instruction(instruction: Instruction) -> str:
    """``OPCODE op1,op2`` with the opcode canonicalised (``TOFF`` -> ``TOF``)."""
    opcode = lookup_opcode(instruction.opcode)
    name = opcode.value if opcode is not None else instruction.opcode
    if not instruction.operands:
        return name
    return f"{name} {','.join(instruction.operands)}"


def to_instruction_list(instructions: Iterable[Instruction]) -> str:
    return "\n".join(format_instruction(i) for i in instructions)


def save_program(path: str | Path, program: Program | Iterable[str]) -> Path:
    """Write the program lines to *path*, one per line."""
    if not isinstance(program, Program):
        program = Program(lines=list(program))
    path = Path(path)
    text = program.to_text()
    path.write_text(text + "\n" if text else "", encoding="utf-8")
    return path


def load_program(path: str | Path) -> Program:
    """Read a program file; case is normalised and trailing blank lines dropped."""
    text = Path(path).read_text(encoding="utf-8")
    return Program.from_text(text).trimmed()


# ---------------------------------------------------------------------------
# Memory table
# ---------------------------------------------------------------------------

def _b(value: bool) -> str:
    return "true" if value else "false"


def format_memory(variable: MemoryVariable) -> str:
    if variable.domain is Domain.MEMORY:
        return f"Boolean memory: {variable.id}, State:{_b(variable.current_value)}"

    if variable.domain is Domain.TIMER:
        if not variable.is_timer:
            return f"Timer memory: {variable.id}, State:{_b(variable.current_value)}, unconfigured"
        label = "Timer On" if variable.timer_type is TimerType.ON else "Timer Off"
        return (
            f"{label} memory: {variable.id}, State:{_b(variable.current_value)}, "
            f"Accum:{variable.counter}, Preset:{variable.max_timer}, DN:{_b(variable.end_timer)}"
        )

    if not variable.is_counter:
        return f"Counter: {variable.id}, State:{_b(variable.current_value)}, unconfigured"
    label = "Counter Up" if variable.counter_type is CounterType.UP else "Counter Down"
    return (
        f"{label}: {variable.id}, Accum:{variable.counter}, "
        f"Preset:{variable.max_timer}, DN:{_b(variable.end_timer)}"
    )


def format_snapshot(snapshot: PLCSnapshot) -> str:
    """Plain-text table of a snapshot: inputs, outputs, then memory tuples."""
    buf = StringIO()
    buf.write(f"Mode: {snapshot.mode.value}  Scans: {snapshot.scan_count}  Clock: {snapshot.clock_ms} ms\n")

    buf.write("Inputs:\n")
    for address, value in snapshot.inputs.items():
        buf.write(f"  {address:<6} {int(value)}  {snapshot.input_types[address].value}\n")

    buf.write("Outputs:\n")
    for address, value in snapshot.outputs.items():
        buf.write(f"  {address:<6} {int(value)}\n")

    if snapshot.memory:
        buf.write("Memory:\n")
        buf.write(f"  {'ID':<6} {'VALUE':<6} {'ACC':>5} {'PRE':>5} DN\n")
        for m in snapshot.memory:
            buf.write(
                f"  {m.id:<6} {int(m.current_value):<6} {m.counter:>5} {m.max_timer:>5} {int(m.end_timer)}\n"
            )
    return buf.getvalue()
