"""Address resolution and line tokenisation.

Public API::

    from ilsim.parse import resolve_address, tokenize_program
    instructions = tokenize_program(["LD I0.0", "ST Q0.0"])
"""

from ._resolver import is_valid_address, resolve_address
from ._tokenizer import tokenize_line, tokenize_program

__all__ = ["is_valid_address", "resolve_address", "tokenize_line", "tokenize_program"]
