"""
Carrier renderers: complete RGBA strips ready to be composited into a UI.

Three carriers are provided, one per channel strategy:

- Opaque strip (byte plane): a thin full-width bar whose R/G/B values
  are the payload bytes, tiled across the width.
- Shadow (alpha LSB): a natural drop-shadow gradient whose alpha LSBs
  in rows 0, 2 and 4 carry the flat DevTag record.
- Hierarchy shadow (RGB LSB): a softer gradient whose R/G/B LSBs in the
  first, middle and last row carry the hierarchical record.
"""

import logging
from typing import Sequence, Tuple

import numpy as np

from src.module2_payload_codec import PayloadCodec, DevTagFields, HierarchicalFields

from .alpha_lsb import AlphaLSBChannel
from .rgb_lsb import RGBLSBChannel
from .byte_plane import BytePlaneChannel


logger = logging.getLogger(__name__)


STRIP_HEIGHT = 4    # survives Retina 2x scaling
SHADOW_HEIGHT = 12
HIERARCHY_SHADOW_HEIGHT = 8

# (position, alpha) colour stops over black
SHADOW_STOPS = ((0.0, 0.15), (0.3, 0.08), (1.0, 0.0))
HIERARCHY_SHADOW_STOPS = ((0.0, 0.12), (0.5, 0.06), (1.0, 0.0))


def gradient_alpha(height: int, stops: Sequence[Tuple[float, float]]) -> np.ndarray:
    """
    Per-row alpha values (0-255) of a vertical linear gradient.

    Each row samples the gradient at its pixel centre.

    Args:
        height: Number of rows
        stops: (position in [0, 1], alpha in [0, 1]) pairs, ascending

    Returns:
        alpha: (height,) uint8 array
    """
    positions = [p for p, _ in stops]
    alphas = [a for _, a in stops]
    centres = (np.arange(height) + 0.5) / height
    values = np.interp(centres, positions, alphas)
    return np.round(values * 255).astype(np.uint8)


def _gradient_canvas(width: int, height: int, stops) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid carrier size: {width}x{height}")
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :, 3] = gradient_alpha(height, stops)[:, None]
    return canvas


def render_strip(fields: DevTagFields, width: int, height: int = STRIP_HEIGHT) -> np.ndarray:
    """
    Render the opaque byte-plane strip.

    Every row carries the same tiled payload, so any surviving row is
    enough to decode it.

    Raises:
        ChannelCapacityError: If the record is longer than 3 * width bytes
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid carrier size: {width}x{height}")

    payload = PayloadCodec().encode(fields)

    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :, 3] = 255

    strip = BytePlaneChannel().write(canvas, payload, rows=range(height))
    logger.debug("Rendered %dx%d strip carrying %d bytes", width, height, len(payload))
    return strip


def render_shadow(fields: DevTagFields, width: int, height: int = SHADOW_HEIGHT) -> np.ndarray:
    """
    Render a drop shadow with the DevTag record in the alpha LSB plane.

    Raises:
        ChannelCapacityError: If the record needs more bits than ``width``
    """
    payload = PayloadCodec().encode(fields)
    canvas = _gradient_canvas(width, height, SHADOW_STOPS)

    channel = AlphaLSBChannel()
    shadow = channel.write(canvas, payload, rows=channel.default_rows(height))
    logger.debug("Rendered %dx%d shadow carrying %d bytes", width, height, len(payload))
    return shadow


def render_hierarchy_shadow(
    fields: HierarchicalFields,
    width: int,
    height: int = HIERARCHY_SHADOW_HEIGHT
) -> np.ndarray:
    """
    Render a drop shadow with the hierarchical record in the R/G/B LSB planes.

    Raises:
        ChannelCapacityError: If the record needs more bits than ``3 * width``
    """
    payload = PayloadCodec().encode(fields)
    canvas = _gradient_canvas(width, height, HIERARCHY_SHADOW_STOPS)

    channel = RGBLSBChannel()
    shadow = channel.write(canvas, payload, rows=channel.default_rows(height))
    logger.debug(
        "Rendered %dx%d hierarchy shadow for %s (%d bytes)",
        width, height, fields.path_string, len(payload)
    )
    return shadow


def composite(background: np.ndarray, carrier: np.ndarray, x: int, y: int) -> np.ndarray:
    """
    Paste a carrier into an RGBA background at (x, y), replacing pixels.

    The carrier is copied verbatim (no blending), which is what a PNG
    export of the rendered canvas preserves.

    Returns:
        A modified copy of ``background``
    """
    h, w = carrier.shape[:2]
    if y < 0 or x < 0 or y + h > background.shape[0] or x + w > background.shape[1]:
        raise ValueError(
            f"Carrier {w}x{h} at ({x}, {y}) does not fit in "
            f"{background.shape[1]}x{background.shape[0]} background"
        )
    out = background.copy()
    out[y:y + h, x:x + w] = carrier
    return out
