"""
Custom exceptions for Module 4: Pattern Synthesis.
"""


class PatternError(Exception):
    """
    Exception raised for invalid pattern synthesis requests.

    This includes:
    - Non-positive tile sizes
    - Negative or non-finite intensities
    - Region shapes the tile cannot be rendered into
    """
    pass
