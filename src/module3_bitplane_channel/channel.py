"""
Channel strategy interface.

A channel maps a byte stream onto one plane of a set of pixel rows in
an RGBA region and reads it back. Writes return a new array; the
caller's region is never modified in place.
"""

from enum import Enum
from typing import Optional, Sequence, List

import numpy as np

from .bit_utils import bytes_to_bits, bits_to_bytes
from .channel_errors import ChannelCapacityError, ChannelRowError


# Type alias
Region = np.ndarray  # Shape: (H, W, 4), dtype: uint8 (RGBA)


class ChannelKind(Enum):
    """Available channel strategies."""
    ALPHA_LSB = "alpha_lsb"
    RGB_LSB = "rgb_lsb"
    BYTE_PLANE = "byte_plane"


class BitPlaneChannel:
    """
    Base class for channel strategies.

    Subclasses define how many bits one pixel carries and implement
    ``_write_row_bits`` / ``_read_row_bits``.
    """

    kind: ChannelKind = None
    bits_per_pixel: int = 1

    def capacity(self, region: Region, row: int = 0) -> int:
        """Bits that can be written starting at ``row`` of ``region``."""
        return region.shape[1] * self.bits_per_pixel

    def default_rows(self, height: int) -> List[int]:
        """Rows written when the caller does not designate any."""
        return [0]

    def write(
        self,
        region: Region,
        data: bytes,
        rows: Optional[Sequence[int]] = None
    ) -> Region:
        """
        Write ``data`` identically into each designated row.

        Args:
            region: (H, W, 4) uint8 RGBA array
            data: Payload bytes
            rows: Rows to write (None = ``default_rows``)

        Returns:
            A modified copy of ``region``

        Raises:
            ChannelCapacityError: If the payload exceeds one row's capacity
            ChannelRowError: If a row lies outside the region
        """
        return self.write_bits(region, bytes_to_bits(data), rows)

    def write_bits(
        self,
        region: Region,
        bits: np.ndarray,
        rows: Optional[Sequence[int]] = None
    ) -> Region:
        """Bit-level variant of ``write``."""
        _validate_region(region)
        height = region.shape[0]
        rows = self._resolve_rows(rows, height)

        bits = np.asarray(bits, dtype=np.uint8) & 1
        if not rows:
            raise ChannelRowError("No rows designated for writing")

        capacity = min(self.capacity(region, row) for row in rows)
        if len(bits) > capacity:
            raise ChannelCapacityError(
                f"Payload needs {len(bits)} bits, row capacity is {capacity} "
                f"({self.kind.value}, width {region.shape[1]})",
                required_bits=len(bits),
                capacity_bits=capacity,
            )

        out = region.copy()
        for row in rows:
            self._write_row_bits(out, row, bits)
        return out

    def read(self, region: Region, row: int, bit_count: Optional[int] = None) -> np.ndarray:
        """
        Read bits from one row.

        Args:
            region: (H, W, 4) uint8 RGBA array
            row: Row index
            bit_count: Number of bits to read (None = full row capacity)

        Returns:
            bits: (min(bit_count, capacity),) uint8 array
        """
        _validate_region(region)
        if row < 0 or row >= region.shape[0]:
            raise ChannelRowError(f"Row {row} outside region of height {region.shape[0]}")

        capacity = self.capacity(region, row)
        count = capacity if bit_count is None else min(bit_count, capacity)
        return self._read_row_bits(region, row, count)

    def read_bytes(self, region: Region, row: int, bit_count: Optional[int] = None) -> bytes:
        """Read one row and pack complete bytes."""
        return bits_to_bytes(self.read(region, row, bit_count))

    def _resolve_rows(self, rows: Optional[Sequence[int]], height: int) -> List[int]:
        if rows is None:
            rows = self.default_rows(height)

        resolved = []
        for row in rows:
            if row < 0 or row >= height:
                raise ChannelRowError(f"Row {row} outside region of height {height}")
            if row not in resolved:
                resolved.append(row)
        return resolved

    def _write_row_bits(self, region: Region, row: int, bits: np.ndarray) -> None:
        raise NotImplementedError

    def _read_row_bits(self, region: Region, row: int, count: int) -> np.ndarray:
        raise NotImplementedError


def _validate_region(region: Region) -> None:
    if not isinstance(region, np.ndarray) or region.ndim != 3 or region.shape[2] != 4:
        shape = getattr(region, 'shape', None)
        raise ValueError(f"Region must be an (H, W, 4) RGBA array, got shape {shape}")
    if region.dtype != np.uint8:
        raise ValueError(f"Region dtype must be uint8, got {region.dtype}")
