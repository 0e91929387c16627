"""Instruction tokenizer: one raw line -> opcode and operand list."""

from __future__ import annotations

import re
from collections.abc import Iterable

from ilsim.errors import ProgramEmptyError
from ilsim.model.instructions import Instruction, Program

_WHITESPACE_RE = re.compile(r"\s+")


def tokenize_line(text: str, line: int = 1) -> Instruction | None:
    """Split one line into opcode and operands.

    The opcode runs up to the first whitespace.  Everything after it is
    stripped of whitespace and split on commas.  Blank lines yield None.
    """
    stripped = text.strip()
    if not stripped:
        return None

    parts = _WHITESPACE_RE.split(stripped, maxsplit=1)
    opcode = parts[0].upper()
    rest = _WHITESPACE_RE.sub("", parts[1]) if len(parts) > 1 else ""
    operands = [op.upper() for op in rest.split(",")] if rest else []
    return Instruction(line=line, opcode=opcode, operands=operands, raw=stripped)


def tokenize_program(lines: Iterable[str] | Program) -> list[Instruction]:
    """Tokenise every non-blank line, numbering lines from 1.

    Raises ``ProgramEmptyError`` if every line is blank.
    """
    if isinstance(lines, Program):
        lines = lines.lines

    instructions: list[Instruction] = []
    for number, text in enumerate(lines, start=1):
        instruction = tokenize_line(text, number)
        if instruction is not None:
            instructions.append(instruction)

    if not instructions:
        raise ProgramEmptyError()
    return instructions
