"""
Byte-plane channel: one payload byte per R, G and B channel value.

Higher capacity than the LSB planes but no tolerance for any change to
the pixel values. The payload is tiled across the whole row, so a decoder
does not need to know where in the row it starts; it reads the full row
of channel bytes and searches for the magic.
"""

import math

import numpy as np

from .bit_utils import bits_to_bytes
from .channel import BitPlaneChannel, ChannelKind, Region


class BytePlaneChannel(BitPlaneChannel):
    """Whole-value R/G/B byte plane."""

    kind = ChannelKind.BYTE_PLANE
    bits_per_pixel = 24

    def _write_row_bits(self, region: Region, row: int, bits: np.ndarray) -> None:
        data = np.frombuffer(bits_to_bytes(bits), dtype=np.uint8)
        if len(data) == 0:
            return

        width = region.shape[1]
        pixels_needed = math.ceil(len(data) / 3)

        # Pad to complete pixels, then repeat across the row
        padded = np.zeros(pixels_needed * 3, dtype=np.uint8)
        padded[:len(data)] = data
        triplets = padded.reshape(pixels_needed, 3)

        region[row, :, :3] = triplets[np.arange(width) % pixels_needed]

    def _read_row_bits(self, region: Region, row: int, count: int) -> np.ndarray:
        values = region[row, :, :3].reshape(-1)
        bits = np.unpackbits(np.ascontiguousarray(values), bitorder='big')
        return bits[:count]

    def read_row(self, region: Region, row: int) -> bytes:
        """Raw R, G, B bytes of one row (3 * width bytes)."""
        return self.read_bytes(region, row)
