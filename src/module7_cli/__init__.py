"""
Module 7: Command-Line Interface

The ``devtag`` console script (encode / decode / scan) and the view-id
registry lookup used to annotate decoded records.
"""

from .cli import main, build_parser, setup_logging
from .registry_lookup import load_registry, lookup

__all__ = [
    'main',
    'build_parser',
    'setup_logging',
    'load_registry',
    'lookup',
]

__version__ = '1.0.0'
