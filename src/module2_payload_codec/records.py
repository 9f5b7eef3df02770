"""
Value types for exact-scheme payloads.

Fields are what callers hand to the encoder; Decoded* records are what
the decoder hands back. All of them are frozen: a record is built once
per encode/decode call and never mutated.
"""

from dataclasses import dataclass, asdict, field
from typing import Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class DevTagFields:
    """Encoder input for the flat DevTag record."""
    view_id: str                     # e.g. "BILLING_02", at most 255 UTF-8 bytes
    route: str                       # e.g. "/settings/billing", hashed to 32 bits
    sha: str = ""                    # short git SHA, truncated/padded to 7 chars
    flags: int = 0                   # caller bitfield, one byte
    timestamp: Optional[int] = None  # unix seconds; None = now


@dataclass(frozen=True)
class HierarchicalFields:
    """Encoder input for the hierarchical (component chain) record."""
    id: str
    type: str
    depth: int
    parent_id: Optional[str] = None
    path: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_chain(cls, chain: Sequence[str], type: str) -> "HierarchicalFields":
        """
        Build fields for the last component of a chain.

        The root has depth 0 and no parent.

        Example:
            >>> HierarchicalFields.from_chain(["BILLING", "actions", "save"], "button").depth
            2
        """
        if len(chain) == 0:
            raise ValueError("Component chain must not be empty")
        chain = tuple(chain)
        return cls(
            id=chain[-1],
            type=type,
            depth=len(chain) - 1,
            parent_id=chain[-2] if len(chain) > 1 else None,
            path=chain,
        )

    @property
    def path_string(self) -> str:
        return "/".join(self.path)


@dataclass(frozen=True)
class DecodedPayload:
    """Decoded flat DevTag record."""
    version: int
    flags: int
    route_hash: int
    sha: str
    view_id: str
    timestamp: int
    checksum: int          # stored checksum byte, -1 when the record was truncated
    checksum_valid: bool
    offset: int = 0        # position of the magic within the searched buffer
    truncated: bool = False

    @property
    def route_hash_hex(self) -> str:
        return f"0x{self.route_hash:08x}"

    def to_dict(self) -> dict:
        data = asdict(self)
        data['route_hash_hex'] = self.route_hash_hex
        return data


@dataclass(frozen=True)
class DecodedHierarchy:
    """Decoded hierarchical record."""
    version: int
    depth: int
    type: str
    id: str
    parent_id: Optional[str]
    path: str
    checksum: int
    checksum_valid: bool
    offset: int = 0
    truncated: bool = False

    @property
    def components(self) -> Tuple[str, ...]:
        """Component chain, root first."""
        return tuple(self.path.split("/")) if self.path else ()

    def to_dict(self) -> dict:
        data = asdict(self)
        data['components'] = list(self.components)
        return data


Fields = Union[DevTagFields, HierarchicalFields]
Decoded = Union[DecodedPayload, DecodedHierarchy]
