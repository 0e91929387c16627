"""Error hierarchy for Instruction List execution.

Every error is scoped to a single program line.  The executor raises;
the scan engine catches, reports, and moves on to the next line.
"""

from __future__ import annotations


class ILError(Exception):
    """Base class for every error reported while running an IL program."""

    kind: str = "error"

    def __init__(self, message: str, line: int | None = None, source: str | None = None):
        self.message = message
        self.line = line
        self.source = source
        super().__init__(self._render())

    def _render(self) -> str:
        if self.line is None:
            return self.message
        if self.source:
            return f"{self.message} (line {self.line}: {self.source})"
        return f"{self.message} (line {self.line})"

    def at(self, line: int, source: str) -> ILError:
        """Attach the program location once it is known."""
        self.line = line
        self.source = source
        self.args = (self._render(),)
        return self


# ---------------------------------------------------------------------------
# Syntax errors
# ---------------------------------------------------------------------------

class InstructionSyntaxError(ILError):
    kind = "syntax"


class UnknownOpcodeError(InstructionSyntaxError):
    def __init__(self, opcode: str):
        self.opcode = opcode
        super().__init__(f"Unknown opcode {opcode!r}")


class InvalidAddressError(InstructionSyntaxError):
    def __init__(self, address: str, reason: str = "does not exist"):
        self.address = address
        super().__init__(f"Address {address!r} {reason}")


class WrongDomainError(InstructionSyntaxError):
    """TON/TOF on a non-timer, or CTU/CTD on a non-counter."""

    def __init__(self, opcode: str, address: str, expected: str):
        self.opcode = opcode
        self.address = address
        super().__init__(f"{opcode} requires a {expected} address, got {address!r}")


class InvalidOperandError(InstructionSyntaxError):
    """Missing primary operand or malformed preset."""


# ---------------------------------------------------------------------------
# Semantic errors
# ---------------------------------------------------------------------------

class InstructionSemanticError(ILError):
    kind = "semantic"


class AccumulatorUnsetError(InstructionSemanticError):
    def __init__(self, opcode: str):
        self.opcode = opcode
        super().__init__(
            f"Accumulator is empty at {opcode}; load a value with LD or LDN first"
        )


class ReadOnlyInputError(InstructionSemanticError):
    def __init__(self, opcode: str, address: str):
        self.opcode = opcode
        self.address = address
        super().__init__(f"{opcode} cannot write to input {address!r}; inputs are read-only")


class UndefinedMemoryError(InstructionSemanticError):
    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Memory variable {address!r} has not been created")


# ---------------------------------------------------------------------------
# Program-level errors
# ---------------------------------------------------------------------------

class ProgramEmptyError(ILError):
    kind = "empty"

    def __init__(self):
        super().__init__("Program contains no instructions")


__all__ = [
    "ILError",
    "InstructionSyntaxError",
    "UnknownOpcodeError",
    "InvalidAddressError",
    "WrongDomainError",
    "InvalidOperandError",
    "InstructionSemanticError",
    "AccumulatorUnsetError",
    "ReadOnlyInputError",
    "UndefinedMemoryError",
    "ProgramEmptyError",
]
