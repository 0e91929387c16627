"""Tests for the scan engine: scan cycle, run modes, inputs and inspection."""

import pytest

from conftest import make_engine

from ilsim.errors import InvalidAddressError, UndefinedMemoryError
from ilsim.model.hardware import IODirection, InputType, IOPoint
from ilsim.model.instructions import Program
from ilsim.model.runtime import PLCConfig, RunMode
from ilsim.simulate import InputBank, ScanEngine
from ilsim.simulate._memory import MemoryVariable, TimerState


# ---------------------------------------------------------------------------
# Construction and program loading
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_starts_idle(self):
        engine = ScanEngine(["LD I0.0"])
        assert engine.mode is RunMode.IDLE
        assert engine.scan_count == 0

    def test_default_io_tables(self):
        engine = ScanEngine()
        assert len(engine.inputs) == 16
        assert len(engine.outputs) == 16
        assert "I1.7" in engine.inputs
        assert "Q1.7" in engine.outputs

    def test_config_sizes_io(self):
        engine = ScanEngine(config=PLCConfig(input_bytes=1, output_bytes=3))
        assert len(engine.inputs) == 8
        assert len(engine.outputs) == 24

    def test_load_text(self):
        engine = ScanEngine("ld i0.0\nst q0.0")
        assert engine.program.lines == ["LD I0.0", "ST Q0.0"]

    def test_plain_store_to_timer_is_not_a_timer(self):
        engine = make_engine("LD I0.0", "ST T5")
        engine.step()
        assert "T5" in engine
        assert list(engine.image.timers()) == []

    def test_load_program_copies(self):
        program = Program(lines=["LD I0.0"])
        engine = ScanEngine(program)
        program.lines.append("ST Q0.0")
        assert len(engine.program) == 1


# ---------------------------------------------------------------------------
# Scan cycle
# ---------------------------------------------------------------------------

class TestStep:
    def test_step_requires_running(self):
        engine = make_engine("LD I0.0", "ST Q0.0", run=False)
        assert engine.step() is None
        assert engine.scan_count == 0

    def test_step_report(self):
        engine = make_engine("LD I0.0", "", "ST Q0.0")
        report = engine.step()
        assert report.scan == 1
        assert report.executed == 2
        assert report.ok

    def test_inputs_sampled_at_scan_start(self):
        engine = make_engine("LD I0.0", "ST Q0.0")
        engine.set_input("I0.0", True)
        assert engine.inputs["I0.0"] is False
        engine.step()
        assert engine.inputs["I0.0"] is True
        assert engine.outputs["Q0.0"] is True

    def test_clock_advances(self):
        engine = make_engine("LD I0.0", scan_period_ms=50)
        engine.scan(4)
        assert engine.scan_count == 4
        assert engine.clock_ms == 200

    def test_outputs_hold_by_default(self):
        engine = make_engine("LD I0.0", "ST Q0.0", inputs={"I0.0": True})
        engine.step()
        engine.load_program(["LD I0.0"])
        engine.step()
        assert engine.outputs["Q0.0"] is True

    def test_outputs_reset_each_scan(self):
        engine = make_engine("LD I0.0", "ST Q0.0", inputs={"I0.0": True},
                             reset_outputs_each_scan=True)
        engine.step()
        engine.load_program(["LD I0.0"])
        engine.step()
        assert engine.outputs["Q0.0"] is False

    def test_tick_rounds_up(self):
        engine = make_engine("LD I0.0")
        reports = engine.tick(ms=250)
        assert len(reports) == 3
        assert engine.clock_ms == 300

    def test_tick_seconds(self):
        engine = make_engine("LD I0.0")
        engine.tick(seconds=1)
        assert engine.scan_count == 10

    def test_tick_zero(self):
        engine = make_engine("LD I0.0")
        assert engine.tick() == []


class TestErrors:
    def test_error_forces_idle(self):
        engine = make_engine("AND I0.0")
        report = engine.step()
        assert not report.ok
        assert report.errors[0].kind == "semantic"
        assert report.errors[0].line == 1
        assert engine.mode is RunMode.IDLE

    def test_remaining_lines_still_execute(self):
        engine = make_engine("LD M1", "LD I0.0", "ST Q0.0", inputs={"I0.0": True})
        report = engine.step()
        assert len(report.errors) == 1
        assert report.executed == 2
        assert engine.outputs["Q0.0"] is True

    def test_every_error_reported(self):
        engine = make_engine("FOO", "LD X1", "ST I0.0")
        report = engine.step()
        assert [e.kind for e in report.errors] == ["syntax", "syntax", "semantic"]
        assert [e.line for e in report.errors] == [1, 2, 3]

    def test_empty_program(self):
        engine = make_engine("", "   ")
        report = engine.step()
        assert report.errors[0].kind == "empty"
        assert engine.mode is RunMode.IDLE

    def test_scan_stops_after_error(self):
        engine = make_engine("AND I0.0")
        reports = engine.scan(5)
        assert len(reports) == 1

    def test_error_observer(self):
        seen = []
        engine = make_engine("LD M9")
        engine.on_error(seen.append)
        engine.step()
        assert isinstance(seen[0], UndefinedMemoryError)

    def test_last_errors(self):
        engine = make_engine("LD M9")
        engine.step()
        assert len(engine.last_errors) == 1
        engine.run()
        assert engine.last_errors == []

    def test_timers_halt_on_error(self):
        engine = make_engine("LD I0.0", "TON T1,10", "LD M5", inputs={"I0.0": True})
        engine.step()
        assert engine["T1"].counter == 0
        assert engine["T1"].state is not TimerState.RUNNING


# ---------------------------------------------------------------------------
# Run modes
# ---------------------------------------------------------------------------

class TestRunModes:
    def _timer_engine(self):
        engine = make_engine("LD I0.0", "TON T1,50", "LD T1", "ST Q0.0",
                             inputs={"I0.0": True})
        engine.scan(5)
        return engine

    def test_pause_keeps_timer_count(self):
        engine = self._timer_engine()
        engine.pause()
        assert engine.mode is RunMode.STOPPED
        assert engine["T1"].counter == 5
        assert not engine["T1"].running

    def test_paused_engine_does_not_scan(self):
        engine = self._timer_engine()
        engine.pause()
        assert engine.scan(3) == []
        assert engine["T1"].counter == 5

    def test_resume_continues_count(self):
        engine = self._timer_engine()
        engine.pause()
        engine.run()
        engine.step()
        assert engine["T1"].counter == 6

    def test_stop_zeroes_timer_count(self):
        engine = self._timer_engine()
        engine.stop()
        assert engine.mode is RunMode.IDLE
        assert engine["T1"].counter == 0

    def test_toggle(self):
        engine = make_engine("LD I0.0", run=False)
        assert engine.toggle() is RunMode.RUNNING
        assert engine.toggle() is RunMode.STOPPED
        assert engine.toggle() is RunMode.RUNNING

    def test_refresh_ignored_while_running(self):
        engine = make_engine("LD I0.0", "ST Q0.0", inputs={"I0.0": True})
        engine.step()
        assert engine.refresh() is False
        assert engine.outputs["Q0.0"] is True

    def test_refresh_hard_reset(self):
        engine = make_engine("LD I0.0", "ST Q0.0", "ST M1", "CTU C1,5",
                             inputs={"I0.0": True})
        engine.step()
        engine.pause()
        assert engine.refresh() is True
        assert engine.outputs["Q0.0"] is False
        assert engine["M1"].current_value is False
        assert engine["C1"].counter == 0
        assert engine["C1"].max_timer == 5

    def test_refresh_keeps_counter_done_bit(self):
        engine = make_engine("LD I0.0", "CTU C1,1", inputs={"I0.0": True})
        engine.step()
        engine.pause()
        engine.refresh()
        assert engine["C1"].counter == 0
        assert engine["C1"].end_timer is True

    def test_refresh_keeps_inputs(self):
        engine = make_engine("LD I0.0", inputs={"I0.0": True})
        engine.step()
        engine.stop()
        engine.refresh()
        assert engine.inputs["I0.0"] is True


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

class TestInputs:
    def test_switch_toggles(self):
        engine = ScanEngine()
        assert engine.press("I0.0") is True
        assert engine.release("I0.0") is True
        assert engine.press("I0.0") is False

    def test_normally_open(self):
        engine = ScanEngine()
        engine.set_input_type("I0.1", InputType.NO)
        assert engine.press("I0.1") is True
        assert engine.release("I0.1") is False

    def test_normally_closed(self):
        engine = ScanEngine()
        engine.set_input_type("I0.2", "NC")
        assert engine.field.values["I0.2"] is True
        assert engine.press("I0.2") is False
        assert engine.release("I0.2") is True

    def test_cycle_type(self):
        engine = ScanEngine()
        assert engine.field.cycle_type("I0.0") is InputType.NO
        assert engine.field.cycle_type("I0.0") is InputType.NC
        assert engine.field.cycle_type("I0.0") is InputType.SWITCH

    def test_unknown_input(self):
        engine = ScanEngine()
        with pytest.raises(InvalidAddressError):
            engine.press("I7.0")

    def test_bank_seeded_from_points(self):
        points = [
            IOPoint(address="I0.0", direction=IODirection.INPUT, input_type=InputType.NC),
            IOPoint(address="I0.1", direction=IODirection.INPUT),
            IOPoint(address="Q0.0", direction=IODirection.OUTPUT),
        ]
        bank = InputBank.from_points(points)
        assert bank.types == {"I0.0": InputType.NC, "I0.1": InputType.SWITCH}
        assert bank.values == {"I0.0": True, "I0.1": False}

    def test_input_source_overrides(self):
        engine = ScanEngine(["LD I0.3", "ST Q0.0"],
                            input_source=lambda: {"i0.3": True, "I9.9": True})
        engine.run()
        engine.step()
        assert engine.inputs["I0.3"] is True
        assert engine.outputs["Q0.0"] is True


# ---------------------------------------------------------------------------
# Inspection
# ---------------------------------------------------------------------------

class TestInspection:
    def test_getitem_io(self):
        engine = make_engine("LD I0.0", "ST Q0.0", inputs={"I0.0": True})
        engine.step()
        assert engine["I0.0"] is True
        assert engine["q0.0"] is True

    def test_getitem_memory(self):
        engine = make_engine("LD I0.0", "ST M1")
        engine.step()
        assert isinstance(engine["M1"], MemoryVariable)

    def test_getitem_uncreated(self):
        engine = ScanEngine()
        with pytest.raises(UndefinedMemoryError):
            engine["M1"]

    def test_setitem_input(self):
        engine = ScanEngine()
        engine["I0.4"] = True
        assert engine.field.values["I0.4"] is True

    def test_setitem_output_rejected(self):
        engine = ScanEngine()
        with pytest.raises(KeyError):
            engine["Q0.0"] = True

    def test_contains(self):
        engine = make_engine("LD I0.0", "ST M1")
        engine.step()
        assert "M1" in engine
        assert "i0.0" in engine
        assert "M2" not in engine

    def test_accumulator_after_scan(self):
        engine = make_engine("LDN I0.0")
        engine.step()
        assert engine.accumulator is True

    def test_snapshot(self):
        engine = make_engine("LD I0.0", "TON T1,5", inputs={"I0.0": True})
        engine.step()
        snap = engine.snapshot()
        assert snap.mode is RunMode.RUNNING
        assert snap.scan_count == 1
        assert snap.clock_ms == 100
        assert snap.inputs["I0.0"] is True
        assert snap.input_types["I0.0"] is InputType.SWITCH
        assert [m.id for m in snap.memory] == ["T1"]
        assert snap.memory[0].counter == 1

    def test_subscribe(self):
        snaps = []
        engine = make_engine("LD I0.0")
        engine.subscribe(snaps.append)
        engine.scan(3)
        assert [s.scan_count for s in snaps] == [1, 2, 3]
