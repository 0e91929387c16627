"""ilsim: Instruction List PLC simulator.

Public API::

    from ilsim import simulate

    plc = simulate(["LD I0.0", "ST Q0.0"])
    plc["I0.0"] = True
    plc.step()
    assert plc["Q0.0"]
"""

from ilsim.errors import (
    AccumulatorUnsetError,
    ILError,
    InstructionSemanticError,
    InstructionSyntaxError,
    InvalidAddressError,
    InvalidOperandError,
    ProgramEmptyError,
    ReadOnlyInputError,
    UndefinedMemoryError,
    UnknownOpcodeError,
    WrongDomainError,
)
from ilsim.model import InputType, PLCConfig, PLCSnapshot, Program, RunMode
from ilsim.simulate import ScanDriver, ScanEngine, simulate

__version__ = "0.1.0"

__all__ = [
    "AccumulatorUnsetError",
    "ILError",
    "InputType",
    "InstructionSemanticError",
    "InstructionSyntaxError",
    "InvalidAddressError",
    "InvalidOperandError",
    "PLCConfig",
    "PLCSnapshot",
    "Program",
    "ProgramEmptyError",
    "ReadOnlyInputError",
    "RunMode",
    "ScanDriver",
    "ScanEngine",
    "UndefinedMemoryError",
    "UnknownOpcodeError",
    "WrongDomainError",
    "simulate",
]
