"""
Exception types for Module 1: Image I/O.
"""


class ImageIOError(Exception):
    """Base exception for image loading, writing and normalization."""
    pass


class InputError(ImageIOError):
    """
    Raised when a source image buffer is missing, unreadable or malformed.

    This is the only failure that propagates out of a scan; every
    per-row or per-tile failure is handled inside the scanner.
    """
    pass
