"""
Module 6: Image Scanner

Searches screenshots for provenance:
    - exact schemes: row search for magic bytes, checksum validation
    - perceptual scheme: overlapping tile sweep, Pearson correlation
    - hashed noise: tile sweep with exact hash lookup

Public Interface:
    - ImageScanner: scan_exact / decode_strip / decode_shadow /
      decode_hierarchy / decode_any / scan_perceptual / scan_noise
    - load_config(path) -> dict
"""

from .scanner import ImageScanner
from .config import load_config, validate_config, DEFAULT_CONFIG_PATH
from .exact_scan import ExactScanner, row_order, strip_rows, full_rows, redundant_rows
from .perceptual_scan import PerceptualScanner, NoiseScanner, grid_origins
from .results import ScanState, ScanResult, PerceptualScanResult
from .exceptions import ScannerConfigurationError

__all__ = [
    "ImageScanner",
    "load_config",
    "validate_config",
    "DEFAULT_CONFIG_PATH",
    "ExactScanner",
    "row_order",
    "strip_rows",
    "full_rows",
    "redundant_rows",
    "PerceptualScanner",
    "NoiseScanner",
    "grid_origins",
    "ScanState",
    "ScanResult",
    "PerceptualScanResult",
    "ScannerConfigurationError",
]

__version__ = "1.0.0"
