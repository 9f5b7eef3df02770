"""
RGB-LSB channel: three payload bits per pixel (R, G, B least-significant bits).

Survives alpha flattening, unlike the alpha channel. The payload is
written identically into several rows; decoders try each row on its
own and accept the first one that checksum-validates.
"""

from typing import List

import numpy as np

from .channel import BitPlaneChannel, ChannelKind, Region


class RGBLSBChannel(BitPlaneChannel):
    """R/G/B least-significant-bit planes, redundant rows."""

    kind = ChannelKind.RGB_LSB
    bits_per_pixel = 3

    def default_rows(self, height: int) -> List[int]:
        """First, middle and last row (duplicates collapse on short regions)."""
        rows = []
        for row in (0, height // 2, height - 1):
            if row not in rows:
                rows.append(row)
        return rows

    def _write_row_bits(self, region: Region, row: int, bits: np.ndarray) -> None:
        width = region.shape[1]
        # Interleaved R0 G0 B0 R1 G1 B1 ...; alpha is never touched
        values = region[row, :, :3].reshape(-1).copy()
        n = len(bits)
        values[:n] = (values[:n] & 0xFE) | bits
        region[row, :, :3] = values.reshape(width, 3)

    def _read_row_bits(self, region: Region, row: int, count: int) -> np.ndarray:
        values = region[row, :, :3].reshape(-1)
        return (values[:count] & 1).astype(np.uint8)
