"""
Exact-scheme row search.

For every row in the search order the channel's bytes are read and each
magic occurrence is validated in turn:

    SEARCHING_ROWS -> FOUND_MAGIC -> VALIDATING -> ACCEPTED | REJECTED

REJECTED resumes the search at the next magic occurrence, then the next
row. The first ACCEPTED record ends the pass. A pass that runs out of
rows returns NOT_FOUND, which is a normal outcome.
"""

import logging
from typing import List, Optional

import numpy as np

from src.module2_payload_codec import PayloadCodec, SchemeId, iter_magic, magic_for
from src.module3_bitplane_channel import BitPlaneChannel, ChannelKind

from .exceptions import ScannerConfigurationError
from .results import ScanResult, ScanState


logger = logging.getLogger(__name__)


def strip_rows(height: int, search_rows: int) -> List[int]:
    """Last ``search_rows`` rows (top to bottom), then the first ``search_rows``."""
    rows = list(range(max(height - search_rows, 0), height))
    for row in range(min(search_rows, height)):
        if row not in rows:
            rows.append(row)
    return rows


def full_rows(height: int) -> List[int]:
    """Every row, top to bottom."""
    return list(range(height))


def redundant_rows(height: int) -> List[int]:
    """First, middle and last row."""
    rows = []
    for row in (0, height // 2, height - 1):
        if row not in rows:
            rows.append(row)
    return rows


def row_order(name: str, height: int, strip_search_rows: int = 8) -> List[int]:
    """
    Resolve a named row order.

    Raises:
        ScannerConfigurationError: If ``name`` is unknown
    """
    if name == "strip":
        return strip_rows(height, strip_search_rows)
    if name == "full":
        return full_rows(height)
    if name == "redundant":
        return redundant_rows(height)
    raise ScannerConfigurationError(f"Unknown row order: {name}")


class ExactScanner:
    """
    Row search for exact payload records.

    Args:
        channel: Channel strategy to read rows with
        scheme: Record layout to look for
        max_payload_bits: Bits read per LSB row (None = full row); the byte
            plane always reads its full row
        max_rows: Bound on rows visited per pass (None = unbounded)
    """

    def __init__(
        self,
        channel: BitPlaneChannel,
        scheme: SchemeId = SchemeId.DEVTAG,
        max_payload_bits: Optional[int] = None,
        max_rows: Optional[int] = None
    ):
        self.channel = channel
        self.scheme = scheme
        self.max_payload_bits = None if channel.kind is ChannelKind.BYTE_PLANE else max_payload_bits
        self.max_rows = max_rows
        self.codec = PayloadCodec()
        self.magic = magic_for(scheme)

    def scan(self, image: np.ndarray, rows: List[int]) -> ScanResult:
        """
        Search ``rows`` of an RGBA image in order.

        Args:
            image: (H, W, 4) uint8 array (already normalized)
            rows: Row indices in search order

        Returns:
            ScanResult with state ACCEPTED or NOT_FOUND
        """
        channel_name = self.channel.kind.value
        rejected = 0
        visited = 0

        for row in rows:
            if self.max_rows is not None and visited >= self.max_rows:
                logger.debug("Row budget of %d exhausted", self.max_rows)
                break
            if row < 0 or row >= image.shape[0]:
                continue

            visited += 1
            self._enter(ScanState.SEARCHING_ROWS, row)
            data = self.channel.read_bytes(image, row, self.max_payload_bits)

            for offset in iter_magic(data, self.magic):
                self._enter(ScanState.FOUND_MAGIC, row, offset)
                self._enter(ScanState.VALIDATING, row, offset)
                payload = self.codec.decode(data, offset, self.scheme)

                if payload.checksum_valid:
                    logger.info(
                        "%s: accepted %s record at row %d offset %d",
                        channel_name, self.scheme.value, row, offset
                    )
                    return ScanResult(
                        state=ScanState.ACCEPTED,
                        scheme=self.scheme,
                        channel=channel_name,
                        payload=payload,
                        row=row,
                        offset=offset,
                        rows_visited=visited,
                        candidates_rejected=rejected,
                    )

                rejected += 1
                self._enter(
                    ScanState.REJECTED, row, offset,
                    "truncated" if payload.truncated else "checksum mismatch"
                )

        return ScanResult(
            state=ScanState.NOT_FOUND,
            scheme=self.scheme,
            channel=channel_name,
            rows_visited=visited,
            candidates_rejected=rejected,
        )

    def _enter(self, state: ScanState, row: int, offset: Optional[int] = None, reason: str = "") -> None:
        logger.debug(
            "%s/%s row %d offset %s -> %s %s",
            self.channel.kind.value, self.scheme.value, row, offset, state.value, reason
        )
