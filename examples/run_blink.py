"""Blink Q0.0 with two chained on-delay timers, driven in real time.

Runs the scan driver on an asyncio loop for three seconds and prints
every change of the output.
"""

import asyncio
from pathlib import Path

from ilsim.log import init_logger
from ilsim.simulate import ScanDriver, simulate

PROGRAM = Path(__file__).with_name("blink.il")


async def main():
    init_logger("ilsim", level="INFO")
    plc = simulate(PROGRAM, run=False)

    last = {"Q0.0": None}

    def show(snapshot):
        value = snapshot.outputs["Q0.0"]
        if value != last["Q0.0"]:
            print(f"{snapshot.clock_ms:>6} ms  Q0.0={int(value)}")
            last["Q0.0"] = value

    plc.subscribe(show)
    driver = ScanDriver(plc)
    driver.start()
    await asyncio.sleep(3)
    await driver.pause()


if __name__ == "__main__":
    asyncio.run(main())
