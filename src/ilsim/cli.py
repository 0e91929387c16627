"""
ilsim: Instruction List PLC simulator CLI

Usage:
    ilsim run <program.il> [--scans N] [--set I0.0=1 ...] [--config plc.toml]
    ilsim check <program.il>

Examples:
    ilsim run examples/start_stop.il --set I0.0=1 --scans 3
    ilsim --log-level DEBUG run examples/delayed_start.il --set I0.0=1 --scans 60
    ilsim check examples/batch_counter.il
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from ilsim.errors import ILError
from ilsim.export.il import format_memory, format_snapshot, load_program
from ilsim.log import init_logger
from ilsim.model.runtime import PLCConfig, load_config
from ilsim.simulate import ScanEngine

logger = logging.getLogger(__name__)


def parse_assignment(value: str) -> tuple[str, bool]:
    """Parse ``ADDR=0|1`` into an address and a boolean."""
    address, sep, raw = value.partition("=")
    if not sep or not address:
        raise argparse.ArgumentTypeError(f"expected ADDR=0|1, got {value!r}")
    raw = raw.strip().lower()
    if raw in ("1", "true", "on"):
        return address.strip().upper(), True
    if raw in ("0", "false", "off"):
        return address.strip().upper(), False
    raise argparse.ArgumentTypeError(f"invalid boolean {raw!r} in {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ilsim",
        description="Scan-cycle simulator for Instruction List PLC programs",
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: WARNING)")
    parser.add_argument("--log-file", default=None,
                        help="Also log to this file (rotated at midnight)")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run a program for a number of scans")
    run.add_argument("program", help="Program file, one instruction per line")
    run.add_argument("--scans", type=int, default=1,
                     help="Number of scan cycles to execute (default: 1)")
    run.add_argument("--set", dest="assignments", action="append", default=[],
                     type=parse_assignment, metavar="ADDR=0|1",
                     help="Force a field input before scanning (repeatable)")
    run.add_argument("--config", default=None,
                     help="TOML file with a [plc] table")

    check = sub.add_parser("check", help="Execute one scan and report every error")
    check.add_argument("program", help="Program file, one instruction per line")

    return parser


def _load_engine(path: str, config: PLCConfig | None = None) -> ScanEngine:
    return ScanEngine(load_program(path), config=config)


def cmd_run(args: argparse.Namespace) -> int:
    config = load_config(args.config) if args.config else None
    engine = _load_engine(args.program, config)
    for address, value in args.assignments:
        engine.set_input(address, value)

    engine.run()
    reports = engine.scan(args.scans)
    print(format_snapshot(engine.snapshot()), end="")

    failed = [e for r in reports for e in r.errors]
    for error in failed:
        print(f"error: {error.message}", file=sys.stderr)
    return 1 if failed else 0


def cmd_check(args: argparse.Namespace) -> int:
    engine = _load_engine(args.program)
    engine.run()
    report = engine.step()
    if report.ok:
        print(f"{args.program}: OK ({report.executed} instructions)")
        for variable in engine.memory.values():
            print(f"  {format_memory(variable)}")
        return 0
    for error in report.errors:
        print(f"{args.program}: {error.kind} error: {error.message}")
    return 1


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    init_logger("ilsim", log_file=args.log_file, level=args.log_level)

    try:
        if args.command == "run":
            return cmd_run(args)
        return cmd_check(args)
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        return 2
    except ValidationError as e:
        print(f"Error: invalid configuration:\n{e}", file=sys.stderr)
        return 2
    except ILError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
