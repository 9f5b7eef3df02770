"""
ImageScanner: recovers provenance from a screenshot.

Exact schemes are searched row by row for magic bytes and validated by
checksum. The perceptual scheme is a correlation sweep against a
registry of recomputed reference tiles.
"""

import logging
from typing import Optional

from src.module1_image_io import to_rgba
from src.module2_payload_codec import SchemeId, max_record_size
from src.module3_bitplane_channel import (
    AlphaLSBChannel,
    BitPlaneChannel,
    BytePlaneChannel,
    RGBLSBChannel,
)
from src.module5_correlation import Registry

from .config import load_config
from .exact_scan import ExactScanner, row_order as resolve_row_order
from .perceptual_scan import NoiseScanner, PerceptualScanner
from .results import PerceptualScanResult, ScanResult, ScanState


logger = logging.getLogger(__name__)


class ImageScanner:
    """
    Scanner facade over the exact and perceptual schemes.

    Args:
        config: Configuration dict (already loaded)
        config_path: Optional YAML file, used when ``config`` is None

    Example:
        >>> scanner = ImageScanner()
        >>> result = scanner.decode_any(image)
        >>> if result.found:
        ...     print(result.payload.view_id)
    """

    def __init__(self, config: Optional[dict] = None, config_path: Optional[str] = None):
        self.config = config if config is not None else load_config(config_path)

    # ------------------------------------------------------------------
    # Exact schemes
    # ------------------------------------------------------------------

    def scan_exact(
        self,
        image,
        channel: BitPlaneChannel,
        row_order: str = "full",
        scheme: SchemeId = SchemeId.DEVTAG,
        max_payload_bits: Optional[int] = None
    ) -> ScanResult:
        """
        Search an image for an exact record.

        Args:
            image: Decoded pixel buffer (RGBA, RGB or grayscale)
            channel: Channel strategy to read rows with
            row_order: 'strip', 'full' or 'redundant'
            scheme: Record layout to look for
            max_payload_bits: Override of exact.max_payload_bits

        Returns:
            ScanResult; ``found`` is False when no valid record exists

        Raises:
            InputError: If the image buffer is missing or malformed
            ScannerConfigurationError: If ``row_order`` is unknown
        """
        rgba = to_rgba(image)
        exact = self.config['exact']

        rows = resolve_row_order(row_order, rgba.shape[0], exact['strip_search_rows'])
        scanner = ExactScanner(
            channel,
            scheme=scheme,
            max_payload_bits=max_payload_bits or exact['max_payload_bits'],
            max_rows=exact['max_rows'],
        )
        return scanner.scan(rgba, rows)

    def decode_strip(self, image) -> ScanResult:
        """Opaque byte-plane strip near the top or bottom edge."""
        return self.scan_exact(image, BytePlaneChannel(), "strip", SchemeId.DEVTAG)

    def decode_shadow(self, image, wrap_rows: bool = False) -> ScanResult:
        """Alpha-LSB shadow; requires a transport that preserves alpha."""
        if not wrap_rows:
            return self.scan_exact(image, AlphaLSBChannel(), "full", SchemeId.DEVTAG)

        # A wrapped record starts in its first row and spans at most the longest record
        rgba = to_rgba(image)
        bits = rgba.shape[1] + 8 * max_record_size(SchemeId.DEVTAG)
        return self.scan_exact(rgba, AlphaLSBChannel(wrap_rows=True), "full", SchemeId.DEVTAG, bits)

    def decode_hierarchy(self, image) -> ScanResult:
        """Hierarchical record in the RGB LSBs of a shadow gradient."""
        order = self.config['exact']['hierarchy_row_order']
        return self.scan_exact(image, RGBLSBChannel(), order, SchemeId.HIERARCHICAL)

    def decode_any(self, image) -> ScanResult:
        """
        Try strip, shadow, wrapped shadow and hierarchy decoding in that order.

        Returns:
            The first accepted result, otherwise the last NOT_FOUND result
        """
        rgba = to_rgba(image)
        result = None

        passes = (
            self.decode_strip,
            self.decode_shadow,
            lambda img: self.decode_shadow(img, wrap_rows=True),
            self.decode_hierarchy,
        )
        for decode in passes:
            result = decode(rgba)
            if result.state is ScanState.ACCEPTED:
                return result

        logger.info("No exact payload found in %dx%d image", rgba.shape[1], rgba.shape[0])
        return result

    # ------------------------------------------------------------------
    # Perceptual schemes
    # ------------------------------------------------------------------

    def scan_perceptual(
        self,
        image,
        registry: Registry,
        threshold: Optional[float] = None,
        tile_size: Optional[int] = None
    ) -> PerceptualScanResult:
        """
        Correlate every grid tile against a registry.

        Args:
            image: Decoded pixel buffer
            registry: Entries from build_registry (same tile size)
            threshold: Override of perceptual.threshold
            tile_size: Override of perceptual.tile_size

        Returns:
            PerceptualScanResult with ranked ComponentMatch list

        Raises:
            InputError: If the image buffer is missing or malformed
        """
        rgba = to_rgba(image)
        perceptual = self.config['perceptual']

        tile_size = tile_size or perceptual['tile_size']
        threshold = perceptual['threshold'] if threshold is None else threshold
        step = max(1, int(tile_size * perceptual['step_fraction']))

        scanner = PerceptualScanner(
            tile_size=tile_size,
            threshold=threshold,
            step=step,
            max_tiles=perceptual['max_tiles'],
        )
        return scanner.scan(rgba, registry)

    def scan_noise(self, image, registry: Registry, tile_size: Optional[int] = None) -> PerceptualScanResult:
        """Exact-hash sweep for hashed noise tiles (registry from build_hash_registry)."""
        rgba = to_rgba(image)
        noise = self.config['noise']
        tile_size = tile_size or noise['tile_size']

        scanner = NoiseScanner(
            tile_size=tile_size,
            step=tile_size * noise['step_tiles'],
        )
        return scanner.scan(rgba, registry)
