"""
Module 2: Payload Codec

Fixed-layout, checksummed byte records for the exact (bit-recoverable)
embedding schemes.

Public API:
    - PayloadCodec: encode / decode / decode_strict / find_payload
    - string_hash(text) -> int (32-bit, browser compatible)
    - locate_magic(buffer, magic) -> int
    - SchemeId: DEVTAG | HIERARCHICAL
"""

from .codec import PayloadCodec, locate_magic, iter_magic, checksum
from .hashing import string_hash, xor_checksum, to_int32, to_uint32
from .records import (
    DevTagFields,
    HierarchicalFields,
    DecodedPayload,
    DecodedHierarchy,
)
from .schemes import (
    SchemeId,
    DEVTAG_MAGIC,
    DEVTAG_VERSION,
    HIERARCHY_MAGIC,
    HIERARCHY_VERSION,
    magic_for,
    max_record_size,
)
from .codec_errors import (
    PayloadError,
    PayloadEncodingError,
    MalformedPayloadError,
    UnknownSchemeError,
)


__all__ = [
    'PayloadCodec',
    'locate_magic',
    'iter_magic',
    'checksum',
    'string_hash',
    'xor_checksum',
    'to_int32',
    'to_uint32',
    'DevTagFields',
    'HierarchicalFields',
    'DecodedPayload',
    'DecodedHierarchy',
    'SchemeId',
    'DEVTAG_MAGIC',
    'DEVTAG_VERSION',
    'HIERARCHY_MAGIC',
    'HIERARCHY_VERSION',
    'magic_for',
    'max_record_size',
    'PayloadError',
    'PayloadEncodingError',
    'MalformedPayloadError',
    'UnknownSchemeError',
]


__version__ = '1.0.0'
