"""Instruction List program model.

A ``Program`` is only an ordered list of text lines.  It is re-tokenised
on every scan; ``Instruction`` is the transient tokeniser output.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, field_validator


class Opcode(str, Enum):
    LD = "LD"
    LDN = "LDN"
    ST = "ST"
    STN = "STN"
    AND = "AND"
    ANDN = "ANDN"
    OR = "OR"
    ORN = "ORN"
    TON = "TON"
    TOF = "TOF"
    CTU = "CTU"
    CTD = "CTD"


OPCODE_ALIASES: dict[str, Opcode] = {
    "TOFF": Opcode.TOF,
}


def lookup_opcode(text: str) -> Opcode | None:
    """Return the opcode named by *text*, or None if unknown."""
    upper = text.upper()
    if upper in OPCODE_ALIASES:
        return OPCODE_ALIASES[upper]
    try:
        return Opcode(upper)
    except ValueError:
        return None


class Instruction(BaseModel):
    """One tokenised program line.

    ``opcode`` is kept as raw text so that an unknown opcode still reaches
    the executor and is reported there.
    """

    line: int
    opcode: str
    operands: list[str] = []
    raw: str = ""

    @property
    def address(self) -> str | None:
        return self.operands[0] if self.operands else None

    @property
    def preset(self) -> str | None:
        return self.operands[1] if len(self.operands) > 1 else None


class Program(BaseModel):
    """An ordered sequence of program text lines, upper-cased on input."""

    lines: list[str] = []

    @field_validator("lines")
    @classmethod
    def _normalize_case(cls, lines: list[str]) -> list[str]:
        return [line.upper() for line in lines]

    @classmethod
    def from_text(cls, text: str) -> Program:
        return cls(lines=text.splitlines())

    def to_text(self) -> str:
        return "\n".join(self.trimmed().lines)

    def trimmed(self) -> Program:
        """Copy without trailing blank lines."""
        lines = list(self.lines)
        while lines and not lines[-1].strip():
            lines.pop()
        return Program(lines=lines)

    def __len__(self) -> int:
        return len(self.lines)
