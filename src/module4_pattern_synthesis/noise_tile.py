"""
Hashed noise tiles.

The older noise-texture scheme: every pixel of a small tile gets a
deterministic pseudo-random gray offset from ``seed * (x+1) * (y+1) * 9973``.
Matching is exact: the decoder hashes the tile's gray values and looks the
hash up, so the tile must reach the decoder unscaled and unblended.

The product exceeds 2**53 for larger tiles; it is computed in IEEE-754
double precision (left to right) exactly as the browser does, so rounding
is reproduced rather than avoided.
"""

import math

import numpy as np

from src.module2_payload_codec import string_hash

from .pattern_errors import PatternError
from .perceptual import NOISE_TEXTURE


NOISE_MULTIPLIER = 9973
DEFAULT_NOISE_TILE = 16
DEFAULT_NOISE_INTENSITY = 0.04


def noise_tile(
    key: str,
    tile_size: int = DEFAULT_NOISE_TILE,
    intensity: float = DEFAULT_NOISE_INTENSITY
) -> np.ndarray:
    """
    Synthesize the integer gray tile of a seed key.

    Returns:
        tile: (tile_size, tile_size) int64 array
    """
    if tile_size <= 0:
        raise PatternError(f"Tile size must be positive, got {tile_size}")
    if not math.isfinite(intensity) or intensity < 0:
        raise PatternError(f"Intensity must be a finite non-negative number, got {intensity}")

    seed = float(string_hash(key))
    xs = np.arange(1, tile_size + 1, dtype=np.float64)[None, :]
    ys = np.arange(1, tile_size + 1, dtype=np.float64)[:, None]

    product = seed * xs * ys * NOISE_MULTIPLIER
    noise = np.fmod(product, 256) / 256
    variation = np.floor((noise - 0.5) * 2 * intensity * 255)

    return (NOISE_TEXTURE + variation).astype(np.int64)


def tile_hash(values: np.ndarray) -> str:
    """
    Hash a tile of integer gray values.

    Values are joined row-major with commas and hashed with string_hash;
    the result is lowercase hex without padding.
    """
    text = ",".join(str(int(v)) for v in np.asarray(values).reshape(-1))
    return format(string_hash(text), 'x')


def noise_tile_hash(
    key: str,
    tile_size: int = DEFAULT_NOISE_TILE,
    intensity: float = DEFAULT_NOISE_INTENSITY
) -> str:
    """Reference hash of a key's noise tile."""
    return tile_hash(noise_tile(key, tile_size, intensity))
