"""
Alpha-LSB channel: one payload bit per pixel in the alpha channel.

Capacity is the row width in bits. Only usable when the transport keeps
the alpha channel (PNG export of a canvas, not a flattened screenshot).

With ``wrap_rows=True`` a payload longer than one row continues into the
following rows in row-major order, which lets narrow strips carry a full
record at the cost of the per-row redundancy.
"""

from typing import List

import numpy as np

from .channel import BitPlaneChannel, ChannelKind, Region
from .channel_errors import ChannelRowError


ALPHA = 3


class AlphaLSBChannel(BitPlaneChannel):
    """Alpha least-significant-bit plane."""

    kind = ChannelKind.ALPHA_LSB
    bits_per_pixel = 1

    def __init__(self, wrap_rows: bool = False):
        self.wrap_rows = wrap_rows

    def capacity(self, region: Region, row: int = 0) -> int:
        if self.wrap_rows:
            return max(region.shape[0] - row, 0) * region.shape[1]
        return region.shape[1]

    def default_rows(self, height: int) -> List[int]:
        if self.wrap_rows:
            return [0]
        # Row 0 plus two redundant copies, as far as the region allows
        return [row for row in (0, 2, 4) if row < height]

    def _resolve_rows(self, rows, height: int) -> List[int]:
        resolved = super()._resolve_rows(rows, height)
        if self.wrap_rows and len(resolved) > 1:
            raise ChannelRowError("Row wrapping writes a single start row, got %s" % resolved)
        return resolved

    def _write_row_bits(self, region: Region, row: int, bits: np.ndarray) -> None:
        n = len(bits)
        if not self.wrap_rows:
            plane = region[row, :n, ALPHA]
            region[row, :n, ALPHA] = (plane & 0xFE) | bits
            return

        # Row-major plane from ``row`` downwards
        height, width = region.shape[:2]
        plane = region[row:, :, ALPHA].reshape(-1).copy()
        plane[:n] = (plane[:n] & 0xFE) | bits
        region[row:, :, ALPHA] = plane.reshape(height - row, width)

    def _read_row_bits(self, region: Region, row: int, count: int) -> np.ndarray:
        if not self.wrap_rows:
            return (region[row, :count, ALPHA] & 1).astype(np.uint8)
        plane = region[row:, :, ALPHA].reshape(-1)
        return (plane[:count] & 1).astype(np.uint8)
