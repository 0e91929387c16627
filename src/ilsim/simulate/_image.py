"""Process image: the input, output and memory tables shared by a scan.

``InputBank`` holds the field-side input values driven by press/release;
the engine copies it into ``ProcessImage.inputs`` at the start of each scan.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from ilsim.errors import InvalidAddressError, UndefinedMemoryError
from ilsim.model.addresses import Address, Domain
from ilsim.model.hardware import IODirection, InputType, IOPoint, default_io_points
from ilsim.model.runtime import PLCConfig

from ._memory import MemoryVariable


class InputBank:
    """Field inputs with per-address ``InputType`` press/release behaviour."""

    def __init__(self, types: Mapping[str, InputType]) -> None:
        self.types: dict[str, InputType] = {a: InputType(t) for a, t in types.items()}
        self.values: dict[str, bool] = {a: t is InputType.NC for a, t in self.types.items()}

    @classmethod
    def from_points(cls, points: Iterable[IOPoint]) -> InputBank:
        return cls({
            p.address: p.input_type or InputType.SWITCH
            for p in points if p.direction is IODirection.INPUT
        })

    def _require(self, address: str) -> str:
        key = address.upper()
        if key not in self.values:
            raise InvalidAddressError(address, "is not an input")
        return key

    def press(self, address: str) -> bool:
        key = self._require(address)
        input_type = self.types[key]
        if input_type is InputType.SWITCH:
            self.values[key] = not self.values[key]
        else:
            self.values[key] = input_type is InputType.NO
        return self.values[key]

    def release(self, address: str) -> bool:
        key = self._require(address)
        input_type = self.types[key]
        if input_type is InputType.NO:
            self.values[key] = False
        elif input_type is InputType.NC:
            self.values[key] = True
        return self.values[key]

    def set(self, address: str, value: bool) -> None:
        self.values[self._require(address)] = bool(value)

    def set_type(self, address: str, input_type: InputType) -> None:
        """Assign a new type; the value resets to the type's released state."""
        key = self._require(address)
        self.types[key] = InputType(input_type)
        self.values[key] = self.types[key] is InputType.NC

    def cycle_type(self, address: str) -> InputType:
        key = self._require(address)
        self.set_type(key, self.types[key].next())
        return self.types[key]

    def read(self) -> dict[str, bool]:
        return dict(self.values)


class ProcessImage:
    """Address-indexed tables for inputs, outputs and memory variables.

    Input and output entries are created once and never removed.  Memory
    variables are created on first store and never destroyed.
    """

    def __init__(
        self,
        inputs: Mapping[str, bool],
        outputs: Mapping[str, bool],
        memory: dict[str, MemoryVariable] | None = None,
    ) -> None:
        self.inputs: dict[str, bool] = dict(inputs)
        self.outputs: dict[str, bool] = dict(outputs)
        self.memory: dict[str, MemoryVariable] = memory if memory is not None else {}

    @classmethod
    def from_config(cls, config: PLCConfig) -> ProcessImage:
        return cls.from_points(default_io_points(config.input_bytes, config.output_bytes))

    @classmethod
    def from_points(cls, points: Iterable[IOPoint]) -> ProcessImage:
        points = list(points)
        return cls(
            inputs={p.address: False for p in points if p.direction is IODirection.INPUT},
            outputs={p.address: False for p in points if p.direction is IODirection.OUTPUT},
        )

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    def read(self, address: Address) -> bool:
        """Boolean value of an address: raw I/Q/M value or T/C done bit."""
        if address.domain.is_io:
            return self._io_table(address)[address.text]

        variable = self.memory.get(address.text)
        if variable is None:
            raise UndefinedMemoryError(address.text)
        if address.domain.reads_done_bit:
            return variable.done
        return variable.current_value

    def _io_table(self, address: Address) -> dict[str, bool]:
        table = self.inputs if address.domain is Domain.INPUT else self.outputs
        if address.text not in table:
            raise InvalidAddressError(address.text)
        return table

    def memory_variable(self, address: Address, create: bool = False) -> MemoryVariable:
        variable = self.memory.get(address.text)
        if variable is None:
            if not create:
                raise UndefinedMemoryError(address.text)
            variable = MemoryVariable.create(address)
            self.memory[address.text] = variable
        return variable

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    def write_output(self, address: Address, value: bool) -> None:
        self._io_table(address)[address.text] = value

    def timers(self) -> Iterator[MemoryVariable]:
        return (v for v in self.memory.values() if v.is_timer)

    def reset_outputs(self) -> None:
        for key in self.outputs:
            self.outputs[key] = False

    def hard_reset(self) -> None:
        """Clear outputs and memory values; timer/counter types survive."""
        self.reset_outputs()
        for variable in self.memory.values():
            variable.hard_reset()
