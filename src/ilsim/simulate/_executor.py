"""Instruction executor: the accumulator-based boolean ALU.

The ``InstructionExecutor`` owns only the accumulator.  The process image
is passed in by reference on every call and mutated in place.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ilsim.errors import (
    AccumulatorUnsetError,
    ILError,
    InvalidOperandError,
    ReadOnlyInputError,
    UnknownOpcodeError,
    WrongDomainError,
)
from ilsim.model.addresses import Address, Domain
from ilsim.model.instructions import Instruction, Opcode, lookup_opcode
from ilsim.parse import resolve_address

from ._image import ProcessImage
from ._memory import CounterType, TimerType

logger = logging.getLogger(__name__)


_NEGATED = frozenset({Opcode.LDN, Opcode.STN, Opcode.ANDN, Opcode.ORN})

_TIMER_MODES: dict[Opcode, TimerType] = {
    Opcode.TON: TimerType.ON,
    Opcode.TOF: TimerType.OFF,
}

_COUNTER_MODES: dict[Opcode, CounterType] = {
    Opcode.CTU: CounterType.UP,
    Opcode.CTD: CounterType.DOWN,
}


class InstructionExecutor:
    """Executes one instruction at a time against a ``ProcessImage``.

    The accumulator starts unset (None) and must be reset at the start of
    every scan cycle with ``reset()``.
    """

    def __init__(self) -> None:
        self.accumulator: bool | None = None

    def reset(self) -> None:
        self.accumulator = None

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def execute(self, instruction: Instruction, image: ProcessImage) -> None:
        """Execute *instruction*, raising an ``ILError`` on failure.

        A failing instruction leaves the accumulator and the tables as they
        were before it ran.
        """
        try:
            opcode = lookup_opcode(instruction.opcode)
            if opcode is None:
                raise UnknownOpcodeError(instruction.opcode)
            handler = self._DISPATCH[opcode]
            handler(self, opcode, instruction, image)
        except ILError as exc:
            exc.at(instruction.line, instruction.raw)
            raise
        logger.debug("%s -> accumulator=%s", instruction.raw, self.accumulator)

    # -----------------------------------------------------------------------
    # Operand helpers
    # -----------------------------------------------------------------------

    @staticmethod
    def _address(opcode: Opcode, instruction: Instruction) -> Address:
        text = instruction.address
        if not text:
            raise InvalidOperandError(f"{opcode.value} requires an address operand")
        return resolve_address(text)

    @staticmethod
    def _preset(opcode: Opcode, instruction: Instruction) -> int:
        text = instruction.preset
        if text is None or text == "":
            raise InvalidOperandError(f"{opcode.value} requires a preset operand")
        if not text.isdecimal():
            raise InvalidOperandError(
                f"{opcode.value} preset must be a non-negative integer, got {text!r}"
            )
        return int(text)

    def _require_accumulator(self, opcode: Opcode) -> bool:
        if self.accumulator is None:
            raise AccumulatorUnsetError(opcode.value)
        return self.accumulator

    # -----------------------------------------------------------------------
    # Handlers
    # -----------------------------------------------------------------------

    def _exec_load(self, opcode: Opcode, instruction: Instruction, image: ProcessImage) -> None:
        value = image.read(self._address(opcode, instruction))
        self.accumulator = (not value) if opcode in _NEGATED else value

    def _exec_logic(self, opcode: Opcode, instruction: Instruction, image: ProcessImage) -> None:
        address = self._address(opcode, instruction)
        accumulator = self._require_accumulator(opcode)
        value = image.read(address)
        if opcode in _NEGATED:
            value = not value
        if opcode in (Opcode.AND, Opcode.ANDN):
            self.accumulator = accumulator and value
        else:
            self.accumulator = accumulator or value

    def _exec_store(self, opcode: Opcode, instruction: Instruction, image: ProcessImage) -> None:
        address = self._address(opcode, instruction)
        if address.domain is Domain.INPUT:
            raise ReadOnlyInputError(opcode.value, address.text)
        accumulator = self._require_accumulator(opcode)
        negated = opcode in _NEGATED

        if address.domain is Domain.OUTPUT:
            image.write_output(address, (not accumulator) if negated else accumulator)
            return

        image.memory_variable(address, create=True).store(accumulator, negated=negated)

    def _exec_timer(self, opcode: Opcode, instruction: Instruction, image: ProcessImage) -> None:
        address = self._address(opcode, instruction)
        if address.domain is not Domain.TIMER:
            raise WrongDomainError(opcode.value, address.text, "timer (T)")
        preset = self._preset(opcode, instruction)

        timer = image.memory_variable(address, create=True)
        timer.configure_timer(_TIMER_MODES[opcode], preset)
        if self.accumulator is not None:
            timer.store(self.accumulator)

    def _exec_counter(self, opcode: Opcode, instruction: Instruction, image: ProcessImage) -> None:
        address = self._address(opcode, instruction)
        if address.domain is not Domain.COUNTER:
            raise WrongDomainError(opcode.value, address.text, "counter (C)")
        preset = self._preset(opcode, instruction)

        counter = image.memory_variable(address, create=True)
        counter.configure_counter(_COUNTER_MODES[opcode], preset)
        if self.accumulator is not None:
            counter.store(self.accumulator)

    _DISPATCH: dict[Opcode, Callable[[InstructionExecutor, Opcode, Instruction, ProcessImage], None]] = {
        Opcode.LD: _exec_load,
        Opcode.LDN: _exec_load,
        Opcode.ST: _exec_store,
        Opcode.STN: _exec_store,
        Opcode.AND: _exec_logic,
        Opcode.ANDN: _exec_logic,
        Opcode.OR: _exec_logic,
        Opcode.ORN: _exec_logic,
        Opcode.TON: _exec_timer,
        Opcode.TOF: _exec_timer,
        Opcode.CTU: _exec_counter,
        Opcode.CTD: _exec_counter,
    }
