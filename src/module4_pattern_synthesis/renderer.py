"""
Rendering patterns into pixel regions.

On screen the tile is a repeating background image with a low alpha,
composited by the browser over the page. These helpers reproduce that
so tests and the CLI can produce realistic screenshots.
"""

import numpy as np

from .pattern_errors import PatternError


def render_tiled(tile: np.ndarray, width: int, height: int, alpha: int = 255) -> np.ndarray:
    """
    Repeat an integer gray tile across a width x height RGBA region.

    Args:
        tile: (T, T) gray values (clipped to [0, 255])
        width: Region width
        height: Region height
        alpha: Alpha of every pixel (the browser encoder uses 15-25)

    Returns:
        region: (height, width, 4) uint8 array
    """
    if width <= 0 or height <= 0:
        raise PatternError(f"Region size must be positive, got {width}x{height}")
    if alpha < 0 or alpha > 255:
        raise PatternError(f"Alpha must be in [0, 255], got {alpha}")

    tile_h, tile_w = tile.shape
    reps_y = -(-height // tile_h)
    reps_x = -(-width // tile_w)

    gray = np.tile(np.clip(tile, 0, 255).astype(np.uint8), (reps_y, reps_x))[:height, :width]

    region = np.empty((height, width, 4), dtype=np.uint8)
    region[:, :, 0] = gray
    region[:, :, 1] = gray
    region[:, :, 2] = gray
    region[:, :, 3] = alpha
    return region


def blend_over(background: np.ndarray, overlay: np.ndarray, x: int = 0, y: int = 0) -> np.ndarray:
    """
    Composite an RGBA overlay over an opaque background (straight alpha).

    Args:
        background: (H, W, 3|4) uint8 array; treated as opaque
        overlay: (h, w, 4) uint8 array
        x, y: Top-left position of the overlay

    Returns:
        composited: (H, W, 4) uint8 array with alpha 255
    """
    h, w = overlay.shape[:2]
    if y < 0 or x < 0 or y + h > background.shape[0] or x + w > background.shape[1]:
        raise PatternError(
            f"Overlay {w}x{h} at ({x}, {y}) does not fit in "
            f"{background.shape[1]}x{background.shape[0]} background"
        )

    out = np.empty(background.shape[:2] + (4,), dtype=np.uint8)
    out[:, :, :3] = background[:, :, :3]
    out[:, :, 3] = 255

    a = overlay[:, :, 3:4].astype(np.float64) / 255
    src = overlay[:, :, :3].astype(np.float64)
    dst = out[y:y + h, x:x + w, :3].astype(np.float64)

    out[y:y + h, x:x + w, :3] = np.round(src * a + dst * (1 - a)).astype(np.uint8)
    return out
