"""
Record assembly and parsing for the exact payload schemes.

DevTag record (23 + N bytes):
    [magic:4][version:1][flags:1][route_hash:4][sha:7][id_len:1][view_id:N][timestamp:4][checksum:1]

Hierarchical record (12 + T + I + P + L bytes):
    [magic:4][version:1][depth:1][type_len:1][type:T][id_len:1][id:I]
    [parent_len:1][parent_id:P][path_len:2][path:L][checksum:1]

All multi-byte integers are big-endian. The checksum is the XOR of every
byte that precedes it, magic included.
"""

import operator
import struct
import time
from typing import Optional

from .codec_errors import PayloadEncodingError
from .hashing import string_hash, xor_checksum
from .records import DevTagFields, HierarchicalFields, DecodedPayload, DecodedHierarchy
from .schemes import (
    DEVTAG_MAGIC,
    DEVTAG_VERSION,
    HIERARCHY_MAGIC,
    HIERARCHY_VERSION,
    MAGIC_SIZE,
    SHA_SIZE,
    SHA_PAD,
    MAX_SHORT_STRING,
    MAX_LONG_STRING,
)


class _Truncated(Exception):
    """Internal signal: a field runs past the end of the buffer."""


class _RecordWriter:
    """Accumulates record bytes; shared by both schemes."""

    def __init__(self, magic: bytes, version: int):
        self.buffer = bytearray(magic)
        self.u8(version, "version")

    def u8(self, value: int, name: str) -> None:
        value = _as_int(value, name)
        if value < 0 or value > 0xFF:
            raise PayloadEncodingError(f"{name} must fit in one byte, got {value!r}")
        self.buffer.append(value)

    def u32(self, value: int, name: str) -> None:
        value = _as_int(value, name)
        if value < 0 or value > 0xFFFFFFFF:
            raise PayloadEncodingError(f"{name} must fit in 32 bits, got {value!r}")
        self.buffer += struct.pack('>I', value)

    def raw(self, data: bytes) -> None:
        self.buffer += data

    def short_string(self, text: str, name: str) -> None:
        data = text.encode('utf-8')
        if len(data) > MAX_SHORT_STRING:
            raise PayloadEncodingError(
                f"{name} is {len(data)} UTF-8 bytes (maximum {MAX_SHORT_STRING})"
            )
        self.buffer.append(len(data))
        self.buffer += data

    def long_string(self, text: str, name: str) -> None:
        data = text.encode('utf-8')
        if len(data) > MAX_LONG_STRING:
            raise PayloadEncodingError(
                f"{name} is {len(data)} UTF-8 bytes (maximum {MAX_LONG_STRING})"
            )
        self.buffer += struct.pack('>H', len(data))
        self.buffer += data

    def finish(self) -> bytes:
        self.buffer.append(xor_checksum(self.buffer))
        return bytes(self.buffer)


class _RecordReader:
    """Bounds-checked cursor over a buffer, starting at a record's magic."""

    def __init__(self, buffer: bytes, offset: int):
        self.buffer = buffer
        self.start = offset
        self.pos = offset

    def take(self, n: int) -> bytes:
        if self.pos + n > len(self.buffer):
            raise _Truncated()
        data = bytes(self.buffer[self.pos:self.pos + n])
        self.pos += n
        return data

    def u8(self) -> int:
        return self.take(1)[0]

    def u16(self) -> int:
        return struct.unpack('>H', self.take(2))[0]

    def u32(self) -> int:
        # struct '>I' is already unsigned; no sign correction needed
        return struct.unpack('>I', self.take(4))[0]

    def short_string(self) -> str:
        return _utf8(self.take(self.u8()))

    def long_string(self) -> str:
        return _utf8(self.take(self.u16()))

    def verify_checksum(self) -> tuple:
        """Return (stored, valid) for the checksum at the cursor."""
        computed = xor_checksum(self.buffer[self.start:self.pos])
        stored = self.u8()
        return stored, stored == computed


def _as_int(value, name: str) -> int:
    try:
        return operator.index(value)
    except TypeError as e:
        raise PayloadEncodingError(f"{name} must be an integer, got {value!r}") from e


def _utf8(data: bytes) -> str:
    return data.decode('utf-8', errors='replace')


def _normalize_sha(sha: Optional[str]) -> bytes:
    sha = (sha or "")[:SHA_SIZE].ljust(SHA_SIZE, SHA_PAD)
    try:
        return sha.encode('ascii')
    except UnicodeEncodeError as e:
        raise PayloadEncodingError(f"sha must be ASCII, got {sha!r}") from e


def assemble_devtag(fields: DevTagFields) -> bytes:
    """
    Assemble a flat DevTag record.

    Args:
        fields: DevTagFields; timestamp None means the current time

    Returns:
        Complete record including checksum

    Raises:
        PayloadEncodingError: If a field does not fit its wire slot
    """
    timestamp = fields.timestamp if fields.timestamp is not None else int(time.time())

    writer = _RecordWriter(DEVTAG_MAGIC, DEVTAG_VERSION)
    writer.u8(fields.flags, "flags")
    writer.u32(string_hash(fields.route), "route hash")
    writer.raw(_normalize_sha(fields.sha))
    writer.short_string(fields.view_id, "view_id")
    writer.u32(timestamp, "timestamp")

    return writer.finish()


def assemble_hierarchy(fields: HierarchicalFields) -> bytes:
    """
    Assemble a hierarchical record.

    Args:
        fields: HierarchicalFields

    Returns:
        Complete record including checksum

    Raises:
        PayloadEncodingError: If a field does not fit its wire slot
    """
    writer = _RecordWriter(HIERARCHY_MAGIC, HIERARCHY_VERSION)
    writer.u8(fields.depth, "depth")
    writer.short_string(fields.type, "type")
    writer.short_string(fields.id, "id")
    writer.short_string(fields.parent_id or "", "parent_id")
    writer.long_string(fields.path_string, "path")

    return writer.finish()


def parse_devtag(buffer: bytes, offset: int = 0) -> DecodedPayload:
    """
    Parse a DevTag record whose magic starts at ``offset``.

    Never raises for bad data: a wrong magic, a checksum mismatch or a
    truncated record all come back with ``checksum_valid=False``.
    """
    reader = _RecordReader(buffer, offset)
    values = {}

    try:
        magic = reader.take(MAGIC_SIZE)
        values['version'] = reader.u8()
        values['flags'] = reader.u8()
        values['route_hash'] = reader.u32()
        values['sha'] = _utf8(reader.take(SHA_SIZE)).rstrip(SHA_PAD)
        values['view_id'] = reader.short_string()
        values['timestamp'] = reader.u32()
        stored, valid = reader.verify_checksum()
    except _Truncated:
        return _truncated_devtag(values, offset)

    return DecodedPayload(
        checksum=stored,
        checksum_valid=valid and magic == DEVTAG_MAGIC,
        offset=offset,
        **values,
    )


def parse_hierarchy(buffer: bytes, offset: int = 0) -> DecodedHierarchy:
    """
    Parse a hierarchical record whose magic starts at ``offset``.

    Same failure contract as parse_devtag.
    """
    reader = _RecordReader(buffer, offset)
    values = {}

    try:
        magic = reader.take(MAGIC_SIZE)
        values['version'] = reader.u8()
        values['depth'] = reader.u8()
        values['type'] = reader.short_string()
        values['id'] = reader.short_string()
        values['parent_id'] = reader.short_string() or None
        values['path'] = reader.long_string()
        stored, valid = reader.verify_checksum()
    except _Truncated:
        defaults = {'version': 0, 'depth': 0, 'type': "", 'id': "", 'parent_id': None, 'path': ""}
        defaults.update(values)
        return DecodedHierarchy(
            checksum=-1, checksum_valid=False, offset=offset, truncated=True, **defaults
        )

    return DecodedHierarchy(
        checksum=stored,
        checksum_valid=valid and magic == HIERARCHY_MAGIC,
        offset=offset,
        **values,
    )


def _truncated_devtag(values: dict, offset: int) -> DecodedPayload:
    defaults = {'version': 0, 'flags': 0, 'route_hash': 0, 'sha': "", 'view_id': "", 'timestamp': 0}
    defaults.update(values)
    return DecodedPayload(
        checksum=-1, checksum_valid=False, offset=offset, truncated=True, **defaults
    )
