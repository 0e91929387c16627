"""Address model for the process image.

An address string starts with a domain letter: ``I`` input, ``Q`` output,
``M`` boolean memory, ``T`` timer, ``C`` counter.  I/O addresses carry a
byte and a bit (``I0.3``); memory addresses carry a single index (``T1``).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, model_validator


class Domain(str, Enum):
    INPUT = "I"
    OUTPUT = "Q"
    MEMORY = "M"
    TIMER = "T"
    COUNTER = "C"

    @property
    def is_io(self) -> bool:
        return self in (Domain.INPUT, Domain.OUTPUT)

    @property
    def is_memory(self) -> bool:
        return not self.is_io

    @property
    def reads_done_bit(self) -> bool:
        """Timers and counters expose their done bit to LD/AND/OR."""
        return self in (Domain.TIMER, Domain.COUNTER)


class Address(BaseModel):
    """A resolved, well-formed address."""

    text: str
    domain: Domain
    index: int
    bit: int | None = None

    @model_validator(mode="after")
    def _check_shape(self):
        if self.index < 0:
            raise ValueError(f"index must be non-negative, got {self.index}")
        if self.domain.is_io and self.bit is None:
            raise ValueError(f"{self.domain.name} address requires a bit number")
        if self.domain.is_memory and self.bit is not None:
            raise ValueError(f"{self.domain.name} address takes no bit number")
        return self

    def __str__(self) -> str:
        return self.text
