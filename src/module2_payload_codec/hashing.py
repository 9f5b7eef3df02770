"""
32-bit string hashing and XOR checksums.

The browser side computes ``h = ((h << 5) - h + charCode) | 0`` over the
UTF-16 code units of a string and finishes with ``h >>> 0``. Python
integers never overflow, so the two's-complement wraparound has to be
applied explicitly after every step or hashes silently diverge.
"""

from functools import reduce
from typing import Iterable


UINT32_MASK = 0xFFFFFFFF


def to_int32(value: int) -> int:
    """Wrap an integer into the signed 32-bit range."""
    value &= UINT32_MASK
    return value - 0x100000000 if value & 0x80000000 else value


def to_uint32(value: int) -> int:
    """Reinterpret an integer as unsigned 32-bit."""
    return value & UINT32_MASK


def utf16_code_units(text: str) -> Iterable[int]:
    """
    Yield the UTF-16 code units of a string.

    Characters outside the Basic Multilingual Plane produce two units
    (a surrogate pair), matching ``String.prototype.charCodeAt``.
    """
    encoded = text.encode('utf-16-le', errors='surrogatepass')
    for i in range(0, len(encoded), 2):
        yield encoded[i] | (encoded[i + 1] << 8)


def string_hash(text: str) -> int:
    """
    Polynomial string hash (multiplier 31) folded to unsigned 32 bits.

    Args:
        text: Any string (route, seed key, tile values)

    Returns:
        hash: Integer in [0, 2**32)

    Example:
        >>> string_hash("hello")
        99162322
    """
    h = 0
    for unit in utf16_code_units(text):
        h = to_int32(h * 31 + unit)
    return to_uint32(h)


def xor_checksum(data: bytes) -> int:
    """XOR-reduce a byte sequence to a single byte."""
    return reduce(lambda acc, b: acc ^ b, data, 0)
