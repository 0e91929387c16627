"""Address resolver: classifies address text into a domain and identity.

All address-namespace validation lives here so the executor never
inspects address strings itself.
"""

from __future__ import annotations

import re

from ilsim.errors import InvalidAddressError
from ilsim.model.addresses import Address, Domain
from ilsim.model.hardware import BITS_PER_BYTE

_IO_RE = re.compile(r"^([IQ])(\d+)\.(\d+)$")
_MEMORY_RE = re.compile(r"^([MTC])(\d+)$")


def resolve_address(text: str) -> Address:
    """Resolve *text* to an ``Address`` or raise ``InvalidAddressError``.

    >>> resolve_address("I0.3").domain
    <Domain.INPUT: 'I'>
    >>> resolve_address("T12").index
    12
    """
    candidate = text.strip().upper()
    if not candidate:
        raise InvalidAddressError(text, "is empty")

    m = _IO_RE.match(candidate)
    if m is not None:
        byte, bit = int(m.group(2)), int(m.group(3))
        if bit >= BITS_PER_BYTE:
            raise InvalidAddressError(text, f"has bit {bit} out of range 0..{BITS_PER_BYTE - 1}")
        return Address(text=candidate, domain=Domain(m.group(1)), index=byte, bit=bit)

    m = _MEMORY_RE.match(candidate)
    if m is not None:
        return Address(text=candidate, domain=Domain(m.group(1)), index=int(m.group(2)))

    if candidate[0] in {d.value for d in Domain}:
        raise InvalidAddressError(text, "is malformed")
    raise InvalidAddressError(text, "is not in a known memory space")


def is_valid_address(text: str) -> bool:
    try:
        resolve_address(text)
    except InvalidAddressError:
        return False
    return True
