"""
Bit-plane channel error types for Module 3.
"""


class ChannelError(Exception):
    """Base exception for Module 3 channel operations."""
    pass


class ChannelCapacityError(ChannelError):
    """Raised when a payload does not fit in the designated rows."""

    def __init__(self, message: str, required_bits: int = None, capacity_bits: int = None):
        super().__init__(message)
        self.required_bits = required_bits
        self.capacity_bits = capacity_bits


class ChannelRowError(ChannelError):
    """Raised when a designated row lies outside the region."""
    pass
