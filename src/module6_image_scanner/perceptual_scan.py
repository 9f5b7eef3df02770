"""
Perceptual grid sweep.

Tiles are sampled on a grid whose step is a fraction of the tile size,
so neighbouring samples overlap. Every tile is scored against the whole
registry and there is no early exit: the per-path tile count is the
ranking signal, so the whole image has to be visited.
"""

import logging
from typing import Iterator, Optional, Tuple

import numpy as np

from src.module1_image_io import to_grayscale
from src.module4_pattern_synthesis import tile_hash
from src.module5_correlation import CorrelationMatcher, MatchAccumulator, Registry, TileMatch

from .results import PerceptualScanResult


logger = logging.getLogger(__name__)


def grid_origins(height: int, width: int, tile_size: int, step: int) -> Iterator[Tuple[int, int]]:
    """
    Yield (y, x) tile origins in row-major order.

    Only origins whose tile lies entirely inside the image are produced.
    """
    for y in range(0, height - tile_size + 1, step):
        for x in range(0, width - tile_size + 1, step):
            yield y, x


def extract_tile(gray: np.ndarray, y: int, x: int, tile_size: int) -> np.ndarray:
    """Gray tile at (y, x); a view into ``gray``."""
    return gray[y:y + tile_size, x:x + tile_size]


class PerceptualScanner:
    """
    Correlation sweep over an image.

    Args:
        tile_size: Edge of the sampled tiles (should equal the registry's)
        threshold: Minimum Pearson score for a hit
        step: Grid step in pixels (default: half the tile)
        max_tiles: Optional bound on tiles visited
    """

    def __init__(
        self,
        tile_size: int = 64,
        threshold: float = 0.7,
        step: Optional[int] = None,
        max_tiles: Optional[int] = None
    ):
        self.tile_size = tile_size
        self.step = step if step is not None else max(1, tile_size // 2)
        self.max_tiles = max_tiles
        self.matcher = CorrelationMatcher(threshold)

    def scan(self, image: np.ndarray, registry: Registry) -> PerceptualScanResult:
        """
        Sweep an RGBA image against a registry.

        Args:
            image: (H, W, 4) uint8 array (already normalized)
            registry: Entries with reference patterns

        Returns:
            PerceptualScanResult with matches ranked by count, then max score
        """
        gray = to_grayscale(image)
        height, width = gray.shape

        accumulator = MatchAccumulator()
        visited = 0

        for y, x in grid_origins(height, width, self.tile_size, self.step):
            if self.max_tiles is not None and visited >= self.max_tiles:
                logger.debug("Tile budget of %d exhausted", self.max_tiles)
                break

            tile = extract_tile(gray, y, x, self.tile_size)
            accumulator.extend(self.matcher.match(tile, registry))
            visited += 1

        matches = accumulator.ranked()
        logger.info(
            "Perceptual scan: %d tiles (step %d), %d components matched",
            visited, self.step, len(matches)
        )

        return PerceptualScanResult(
            matches=matches,
            tiles_visited=visited,
            tile_size=self.tile_size,
            step=self.step,
        )


class NoiseScanner:
    """
    Exact-hash sweep for hashed noise tiles.

    Args:
        tile_size: Noise tile edge
        step: Grid step in pixels (default: two tiles)
    """

    def __init__(self, tile_size: int = 16, step: Optional[int] = None):
        self.tile_size = tile_size
        self.step = step if step is not None else tile_size * 2
        self.matcher = CorrelationMatcher()

    def scan(self, image: np.ndarray, registry: Registry) -> PerceptualScanResult:
        gray = to_grayscale(image)
        # Round half up, like Math.round on the channel mean
        rounded = np.floor(gray + 0.5).astype(np.int64)
        height, width = rounded.shape

        accumulator = MatchAccumulator()
        visited = 0

        for y, x in grid_origins(height, width, self.tile_size, self.step):
            digest = tile_hash(extract_tile(rounded, y, x, self.tile_size))
            entry = self.matcher.match_hash(digest, registry)
            if entry is not None:
                accumulator.add(TileMatch(entry.path, entry.type, entry.depth, 1.0))
            visited += 1

        matches = accumulator.ranked()
        logger.info("Noise scan: %d tiles, %d components matched", visited, len(matches))

        return PerceptualScanResult(
            matches=matches,
            tiles_visited=visited,
            tile_size=self.tile_size,
            step=self.step,
        )
