"""ilsim export: IL text output and program files.

Public API::

    from ilsim.export import load_program, save_program
    save_program("start_stop.il", ["LD I0.0", "ST Q0.0"])
"""

from .il import (
    format_instruction,
    format_memory,
    format_snapshot,
    load_program,
    save_program,
    to_instruction_list,
)

__all__ = [
    "format_instruction",
    "format_memory",
    "format_snapshot",
    "load_program",
    "save_program",
    "to_instruction_list",
]
