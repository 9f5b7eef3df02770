"""
Custom exceptions for Module 6: Image Scanner.
"""


class ScannerConfigurationError(Exception):
    """
    Raised when scanner configuration is invalid.

    This includes:
    - Non-positive tile sizes or steps
    - Thresholds outside [-1, 1]
    - Unknown row orders
    """
    pass
