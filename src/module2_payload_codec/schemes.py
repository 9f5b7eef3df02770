"""
Wire-format constants for the exact (bit-recoverable) payload schemes.

Both record layouts share the same envelope: 4 magic bytes, a version
byte, scheme-specific fields, and a trailing XOR checksum over every
preceding byte. SchemeId is the discriminant that selects the layout.
"""

from enum import Enum


class SchemeId(Enum):
    """Discriminant for the exact payload layouts."""
    DEVTAG = "devtag"              # flat leaf record: view id + build metadata
    HIERARCHICAL = "hierarchical"  # component chain: id, parent id, full path


# "DTAG"
DEVTAG_MAGIC = b"\x44\x54\x41\x47"
DEVTAG_VERSION = 0x01

# "PXPV" (PixelProvenance)
HIERARCHY_MAGIC = b"\x50\x58\x50\x56"
HIERARCHY_VERSION = 0x02

MAGIC_SIZE = 4
SHA_SIZE = 7
SHA_PAD = "0"

MAX_SHORT_STRING = 0xFF    # one-byte length prefix
MAX_LONG_STRING = 0xFFFF   # two-byte length prefix (hierarchical path)

# magic + version + flags + route hash + sha + id length + timestamp + checksum
DEVTAG_FIXED_SIZE = MAGIC_SIZE + 1 + 1 + 4 + SHA_SIZE + 1 + 4 + 1

# magic + version + depth + 3 short length prefixes + path length + checksum
HIERARCHY_FIXED_SIZE = MAGIC_SIZE + 1 + 1 + 3 + 2 + 1


SCHEME_MAGIC = {
    SchemeId.DEVTAG: DEVTAG_MAGIC,
    SchemeId.HIERARCHICAL: HIERARCHY_MAGIC,
}


def magic_for(scheme: SchemeId) -> bytes:
    """Return the magic bytes of a scheme."""
    return SCHEME_MAGIC[scheme]


def max_record_size(scheme: SchemeId) -> int:
    """Largest possible encoded record for a scheme, in bytes."""
    if scheme is SchemeId.DEVTAG:
        return DEVTAG_FIXED_SIZE + MAX_SHORT_STRING
    return HIERARCHY_FIXED_SIZE + 3 * MAX_SHORT_STRING + MAX_LONG_STRING
