"""
Correlation/registry exception hierarchy.
"""


class CorrelationError(Exception):
    """Base exception for all Module 5 errors."""
    pass


class RegistryError(CorrelationError):
    """Raised when a component list or registry file is missing fields or malformed."""
    pass
