"""
Bit/byte conversion helpers shared by all channel strategies.

Bits are always MSB-first within each byte.
"""

import numpy as np


def bytes_to_bits(data: bytes) -> np.ndarray:
    """
    Convert bytes to bit array.

    Args:
        data: Bytes

    Returns:
        bits: Bit array (N*8,) uint8 with 0/1 values
    """
    if len(data) == 0:
        return np.array([], dtype=np.uint8)

    return np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8), bitorder='big')


def bits_to_bytes(bits: np.ndarray) -> bytes:
    """
    Convert bit array to bytes.

    Only complete bytes are produced; a trailing group of fewer than
    8 bits is dropped rather than padded, so a short read never
    fabricates a byte the channel did not carry.

    Args:
        bits: Bit array (N,) with 0/1 integers

    Returns:
        data: floor(N / 8) bytes
    """
    bits = np.asarray(bits, dtype=np.uint8) & 1
    usable = (len(bits) // 8) * 8

    if usable == 0:
        return b''

    return np.packbits(bits[:usable], bitorder='big').tobytes()
