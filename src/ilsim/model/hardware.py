"""I/O configuration for the simulated controller.

Deliberately minimal: one flat bank of boolean inputs and one of boolean
outputs, addressed ``I<byte>.<bit>`` / ``Q<byte>.<bit>``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

BITS_PER_BYTE = 8


class IODirection(str, Enum):
    INPUT = "INPUT"
    OUTPUT = "OUTPUT"


class InputType(str, Enum):
    """How a physical input reacts to press/release.

    SWITCH toggles on press and holds; NO is TRUE while held; NC is the
    inverse of NO.
    """

    SWITCH = "SWITCH"
    NO = "NO"
    NC = "NC"

    def next(self) -> InputType:
        """Cycle SWITCH -> NO -> NC -> SWITCH."""
        members = list(InputType)
        return members[(members.index(self) + 1) % len(members)]


class IOPoint(BaseModel):
    """A single boolean I/O point."""

    address: str
    direction: IODirection
    input_type: InputType | None = None


def io_addresses(prefix: str, n_bytes: int) -> list[str]:
    """Addresses ``<prefix>0.0`` .. ``<prefix>{n_bytes-1}.7`` in order."""
    return [
        f"{prefix}{byte}.{bit}"
        for byte in range(n_bytes)
        for bit in range(BITS_PER_BYTE)
    ]


def default_io_points(input_bytes: int = 2, output_bytes: int = 2) -> list[IOPoint]:
    points = [
        IOPoint(address=a, direction=IODirection.INPUT, input_type=InputType.SWITCH)
        for a in io_addresses("I", input_bytes)
    ]
    points += [
        IOPoint(address=a, direction=IODirection.OUTPUT)
        for a in io_addresses("Q", output_bytes)
    ]
    return points
