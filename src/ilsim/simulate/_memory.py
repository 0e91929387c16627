"""Memory variables: boolean flags, ON/OFF-delay timers and UP/DOWN counters.

A ``MemoryVariable`` is created lazily by the first storing instruction
that targets its address and lives as long as the engine.  Timers have a
periodic tick driven by ``advance()``; counters change only through the
edge rule applied by ``store()`` during a scan.
"""

from __future__ import annotations

from enum import Enum

from ilsim.model.addresses import Address, Domain
from ilsim.model.snapshot import MemorySnapshot


class TimerType(str, Enum):
    ON = "ON"
    OFF = "OFF"


class CounterType(str, Enum):
    UP = "UP"
    DOWN = "DOWN"


class TimerState(str, Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    DONE = "DONE"


class MemoryVariable:
    """One stateful memory cell.

    Parameters
    ----------
    id : str
        The address text, e.g. ``"M1"``, ``"T3"``, ``"C0"``.
    domain : Domain
        MEMORY, TIMER or COUNTER.  Fixed for the life of the variable.
    """

    def __init__(self, id: str, domain: Domain) -> None:
        if domain.is_io:
            raise ValueError(f"memory variable cannot live in the {domain.name} domain")
        self.id = id
        self.domain = domain
        self.current_value = False
        self.end_timer = False
        self.counter = 0
        self.max_timer = 0
        self.timer_type: TimerType | None = None
        self.counter_type: CounterType | None = None
        self.running = False
        self._expired = False
        self._elapsed_ms = 0

    @classmethod
    def create(cls, address: Address) -> MemoryVariable:
        return cls(address.text, address.domain)

    def __repr__(self) -> str:
        return (
            f"MemoryVariable(id={self.id!r}, current_value={self.current_value}, "
            f"counter={self.counter}, max_timer={self.max_timer}, end_timer={self.end_timer})"
        )

    @property
    def done(self) -> bool:
        return self.end_timer

    @property
    def is_timer(self) -> bool:
        return self.timer_type is not None

    @property
    def is_counter(self) -> bool:
        return self.counter_type is not None

    # -----------------------------------------------------------------------
    # Configuration
    # -----------------------------------------------------------------------

    def configure_timer(self, timer_type: TimerType, preset: int) -> None:
        """Set type and preset; an accumulated count above a lowered preset is capped."""
        self.timer_type = timer_type
        self.max_timer = preset
        self.counter = min(self.counter, preset)

    def configure_counter(self, counter_type: CounterType, preset: int) -> None:
        self.counter_type = counter_type
        self.max_timer = preset

    # -----------------------------------------------------------------------
    # Store / counter edge rule
    # -----------------------------------------------------------------------

    def store(self, accumulator: bool, negated: bool = False) -> None:
        """Apply ST (or STN when *negated*) with the accumulator value.

        For counters the previous ``current_value`` is compared against the
        accumulator: ST counts on FALSE -> TRUE, STN on TRUE -> FALSE.
        """
        if self.is_counter:
            previous = self.current_value
            if negated:
                edge = previous and not accumulator
            else:
                edge = not previous and accumulator
            if edge:
                if self.counter_type is CounterType.UP:
                    self.increment()
                else:
                    self.decrement()

        self.current_value = (not accumulator) if negated else accumulator

    def increment(self) -> None:
        self.counter += 1
        self._update_counter_done()

    def decrement(self) -> None:
        self.counter -= 1
        self._update_counter_done()

    def _update_counter_done(self) -> None:
        if self.counter_type is CounterType.UP:
            self.end_timer = self.counter >= self.max_timer
        elif self.counter_type is CounterType.DOWN:
            self.end_timer = self.counter <= self.max_timer

    # -----------------------------------------------------------------------
    # Timer state machine
    # -----------------------------------------------------------------------

    @property
    def state(self) -> TimerState:
        if self.running:
            return TimerState.RUNNING
        if self._expired:
            return TimerState.DONE
        return TimerState.IDLE

    def reconcile(self) -> None:
        """Start or halt the tick against the commanded condition.

        ON-delay runs while ``current_value`` is TRUE, OFF-delay while it
        is FALSE.  Leaving the running condition halts and resets.
        """
        if self.timer_type is TimerType.ON:
            if self.current_value:
                self.running = True
            else:
                self._reset_timing(end_timer=False)
        elif self.timer_type is TimerType.OFF:
            if self.current_value:
                self._reset_timing(end_timer=True)
            else:
                self.running = True

    def _reset_timing(self, end_timer: bool) -> None:
        self.halt()
        self.counter = 0
        self.end_timer = end_timer
        self._expired = False

    def tick(self) -> None:
        """One timer period: count towards the preset, latch the done bit at it."""
        if not self.running:
            return
        if self.counter < self.max_timer:
            self.counter += 1
        if self.counter >= self.max_timer:
            self.end_timer = self.timer_type is TimerType.ON
            self._expired = True
            self.running = False

    def advance(self, elapsed_ms: int, period_ms: int) -> int:
        """Feed *elapsed_ms* of simulated time; returns the number of ticks fired."""
        if not self.running:
            self._elapsed_ms = 0
            return 0
        self._elapsed_ms += elapsed_ms
        fired = 0
        while self.running and self._elapsed_ms >= period_ms:
            self._elapsed_ms -= period_ms
            self.tick()
            fired += 1
        if not self.running:
            self._elapsed_ms = 0
        return fired

    def halt(self) -> None:
        self.running = False
        self._elapsed_ms = 0

    # -----------------------------------------------------------------------
    # Reset
    # -----------------------------------------------------------------------

    def reset_accumulator(self) -> None:
        """Halt and zero the accumulated count; configuration is kept."""
        self.halt()
        self.counter = 0
        self._expired = False

    def hard_reset(self) -> None:
        """Halt, zero the count and clear ``current_value``.

        ``end_timer`` is left as it was, so a counter that reached its preset
        still reads TRUE until the next edge or timer reconcile updates it.
        """
        self.reset_accumulator()
        self.current_value = False

    def snapshot(self) -> MemorySnapshot:
        return MemorySnapshot(
            id=self.id,
            current_value=self.current_value,
            counter=self.counter,
            max_timer=self.max_timer,
            end_timer=self.end_timer,
            timer_type=self.timer_type.value if self.timer_type else None,
            counter_type=self.counter_type.value if self.counter_type else None,
        )
