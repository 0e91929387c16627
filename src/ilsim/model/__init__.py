"""Pydantic data model for programs, addresses, I/O and snapshots."""

from .addresses import Address, Domain
from .hardware import IODirection, IOPoint, InputType, default_io_points, io_addresses
from .instructions import Instruction, Opcode, Program, lookup_opcode
from .runtime import PLCConfig, RunMode, load_config
from .snapshot import ErrorRecord, MemorySnapshot, PLCSnapshot, ScanReport

__all__ = [
    "Address",
    "Domain",
    "ErrorRecord",
    "IODirection",
    "IOPoint",
    "InputType",
    "Instruction",
    "MemorySnapshot",
    "Opcode",
    "PLCConfig",
    "PLCSnapshot",
    "Program",
    "RunMode",
    "ScanReport",
    "default_io_points",
    "io_addresses",
    "load_config",
    "lookup_opcode",
]
