"""
PatternSynthesizer: the public face of Module 4.

Pattern generation is a pure function of (seed key, size, intensity,
baseline). Nothing is ever transmitted; encoder and decoder each
recompute the reference pattern and compare.
"""

import numpy as np

from .noise_tile import (
    noise_tile,
    noise_tile_hash,
    DEFAULT_NOISE_TILE,
    DEFAULT_NOISE_INTENSITY,
)
from .perceptual import perceptual_pattern, PAGE_GRAIN
from .renderer import render_tiled
from .seed_keys import seed_key


class PatternSynthesizer:
    """
    Deterministic pattern generator.

    Stateless; safe to share between scans.
    """

    def tile(
        self,
        key: str,
        size: int = 64,
        intensity: float = 0.15,
        baseline: int = PAGE_GRAIN,
        quantize: bool = False
    ) -> np.ndarray:
        """
        Square perceptual reference tile for a seed key.

        Args:
            key: Seed key string
            size: Tile edge in pixels
            intensity: Variation scale
            baseline: Gray baseline (PAGE_GRAIN or NOISE_TEXTURE)
            quantize: Floor the variation like the on-screen renderer

        Returns:
            tile: (size, size) float64 array
        """
        return perceptual_pattern(key, size, size, intensity, baseline, quantize)

    def component_tile(
        self,
        path: str,
        type: str,
        depth: int,
        size: int = 64,
        intensity: float = 0.15,
        baseline: int = PAGE_GRAIN
    ) -> np.ndarray:
        """Reference tile of a component, keyed by its canonical seed key."""
        return self.tile(seed_key(path, type, depth), size, intensity, baseline)

    def noise_tile(
        self,
        key: str,
        size: int = DEFAULT_NOISE_TILE,
        intensity: float = DEFAULT_NOISE_INTENSITY
    ) -> np.ndarray:
        """Integer hashed-noise tile of a seed key."""
        return noise_tile(key, size, intensity)

    def noise_hash(
        self,
        key: str,
        size: int = DEFAULT_NOISE_TILE,
        intensity: float = DEFAULT_NOISE_INTENSITY
    ) -> str:
        """Reference hash of a key's noise tile."""
        return noise_tile_hash(key, size, intensity)

    def render(
        self,
        key: str,
        width: int,
        height: int,
        tile_size: int = 64,
        intensity: float = 0.15,
        baseline: int = PAGE_GRAIN,
        alpha: int = 255
    ) -> np.ndarray:
        """
        Render a key's perceptual tile repeated over a region.

        Returns:
            region: (height, width, 4) uint8 RGBA array
        """
        tile = self.tile(key, tile_size, intensity, baseline, quantize=True)
        return render_tiled(tile, width, height, alpha)

    def render_noise(
        self,
        key: str,
        width: int,
        height: int,
        tile_size: int = DEFAULT_NOISE_TILE,
        intensity: float = DEFAULT_NOISE_INTENSITY,
        alpha: int = 255
    ) -> np.ndarray:
        """Render a key's noise tile repeated over a region."""
        return render_tiled(self.noise_tile(key, tile_size, intensity), width, height, alpha)
