"""
Scan states and results.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from src.module2_payload_codec import DecodedPayload, DecodedHierarchy, SchemeId
from src.module5_correlation import ComponentMatch


class ScanState(Enum):
    """States of the exact-scheme row search."""
    SEARCHING_ROWS = "searching_rows"
    FOUND_MAGIC = "found_magic"
    VALIDATING = "validating"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one exact-scheme search pass."""
    state: ScanState
    scheme: SchemeId
    channel: str
    payload: Optional[Union[DecodedPayload, DecodedHierarchy]] = None
    row: Optional[int] = None
    offset: Optional[int] = None
    rows_visited: int = 0
    candidates_rejected: int = 0

    @property
    def found(self) -> bool:
        return self.state is ScanState.ACCEPTED

    def to_dict(self) -> dict:
        return {
            'found': self.found,
            'scheme': self.scheme.value,
            'channel': self.channel,
            'row': self.row,
            'offset': self.offset,
            'rows_visited': self.rows_visited,
            'candidates_rejected': self.candidates_rejected,
            'payload': self.payload.to_dict() if self.payload is not None else None,
        }


@dataclass(frozen=True)
class PerceptualScanResult:
    """Outcome of a perceptual or hashed-noise grid sweep."""
    matches: List[ComponentMatch]
    tiles_visited: int
    tile_size: int
    step: int

    @property
    def found(self) -> bool:
        return len(self.matches) > 0
