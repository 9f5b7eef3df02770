"""
Payload codec error types for Module 2.
"""


class PayloadError(Exception):
    """Base exception for Module 2 payload operations."""
    pass


class PayloadEncodingError(PayloadError):
    """Raised when fields fall outside the wire format's ranges."""
    pass


class MalformedPayloadError(PayloadError):
    """
    Raised by strict decoding when a record is unusable.

    Covers checksum mismatches, missing magic and length prefixes that
    run past the end of the buffer. Scanners never let this escape;
    they move on to the next candidate offset or row.
    """

    def __init__(self, message: str, offset: int = None):
        super().__init__(message)
        self.offset = offset


class UnknownSchemeError(PayloadError):
    """Raised when a scheme id has no registered wire layout."""
    pass
