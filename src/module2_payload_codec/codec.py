"""
PayloadCodec: one entry point for both exact payload schemes.

The scheme is selected by the type of the fields on encode and by an
explicit SchemeId on decode. Magic location is a plain first-match scan;
because channel bytes are ordinary image content, incidental magic
matches are expected and the checksum is the only validity gate.
"""

import logging
from typing import Iterator, Optional

from .codec_errors import MalformedPayloadError, UnknownSchemeError
from .framing import assemble_devtag, assemble_hierarchy, parse_devtag, parse_hierarchy
from .hashing import xor_checksum
from .records import DevTagFields, HierarchicalFields, Fields, Decoded
from .schemes import SchemeId, magic_for


logger = logging.getLogger(__name__)


_PARSERS = {
    SchemeId.DEVTAG: parse_devtag,
    SchemeId.HIERARCHICAL: parse_hierarchy,
}


def locate_magic(buffer: bytes, magic: bytes, start: int = 0) -> int:
    """
    Find the first occurrence of ``magic`` at or after ``start``.

    Returns:
        index of the first magic byte, or -1 if not found
    """
    return bytes(buffer).find(magic, start)


def iter_magic(buffer: bytes, magic: bytes) -> Iterator[int]:
    """Yield every offset at which ``magic`` occurs, in ascending order."""
    data = bytes(buffer)
    index = data.find(magic)
    while index != -1:
        yield index
        index = data.find(magic, index + 1)


def checksum(data: bytes) -> int:
    """XOR of all bytes in ``data``."""
    return xor_checksum(data)


class PayloadCodec:
    """
    Encoder/decoder for the exact payload records.

    Stateless; a single instance can be shared freely.
    """

    def encode(self, fields: Fields) -> bytes:
        """
        Serialize fields to a checksummed record.

        Args:
            fields: DevTagFields or HierarchicalFields

        Returns:
            record bytes

        Raises:
            PayloadEncodingError: If a field does not fit the wire format
            UnknownSchemeError: If ``fields`` is of an unsupported type
        """
        if isinstance(fields, DevTagFields):
            return assemble_devtag(fields)
        if isinstance(fields, HierarchicalFields):
            return assemble_hierarchy(fields)
        raise UnknownSchemeError(f"No wire layout for {type(fields).__name__}")

    def decode(
        self,
        buffer: bytes,
        offset: int = 0,
        scheme: SchemeId = SchemeId.DEVTAG
    ) -> Decoded:
        """
        Decode the record whose magic starts at ``offset``.

        The result always carries ``checksum_valid``; callers must treat
        an invalid result as "no payload" and never trust its fields.

        Raises:
            UnknownSchemeError: If ``scheme`` has no parser
        """
        try:
            parser = _PARSERS[scheme]
        except KeyError as e:
            raise UnknownSchemeError(f"Unknown scheme: {scheme!r}") from e
        return parser(buffer, offset)

    def decode_strict(
        self,
        buffer: bytes,
        offset: int = 0,
        scheme: SchemeId = SchemeId.DEVTAG
    ) -> Decoded:
        """
        Decode like ``decode`` but raise on an invalid record.

        Raises:
            MalformedPayloadError: If the record is truncated or fails the checksum
        """
        result = self.decode(buffer, offset, scheme)
        if result.truncated:
            raise MalformedPayloadError(
                f"Record at offset {offset} runs past the end of the buffer", offset=offset
            )
        if not result.checksum_valid:
            raise MalformedPayloadError(
                f"Checksum mismatch for record at offset {offset}", offset=offset
            )
        return result

    def locate_magic(self, buffer: bytes, scheme: SchemeId = SchemeId.DEVTAG, start: int = 0) -> int:
        """First offset of the scheme's magic in ``buffer``, or -1."""
        return locate_magic(buffer, magic_for(scheme), start)

    def find_payload(
        self,
        buffer: bytes,
        scheme: SchemeId = SchemeId.DEVTAG
    ) -> Optional[Decoded]:
        """
        Decode the first checksum-valid record anywhere in ``buffer``.

        Every magic occurrence is tried in order; corrupted or incidental
        matches are skipped.

        Returns:
            decoded record, or None if no valid record exists
        """
        for offset in iter_magic(buffer, magic_for(scheme)):
            result = self.decode(buffer, offset, scheme)
            if result.checksum_valid:
                return result
            logger.debug("Rejected %s candidate at offset %d", scheme.value, offset)
        return None

    def roundtrip(self, fields: Fields) -> Decoded:
        """
        Encode then strictly decode ``fields``.

        Useful to validate fields before rendering a carrier.
        """
        scheme = SchemeId.DEVTAG if isinstance(fields, DevTagFields) else SchemeId.HIERARCHICAL
        return self.decode_strict(self.encode(fields), 0, scheme)


__all__ = [
    'PayloadCodec',
    'locate_magic',
    'iter_magic',
    'checksum',
]
