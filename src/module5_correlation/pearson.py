"""
Pearson correlation between two gray tiles.
"""

import numpy as np


def score(tile_a: np.ndarray, tile_b: np.ndarray) -> float:
    """
    Pearson correlation coefficient over the overlapping region.

    Only the top-left ``min(rows) x min(cols)`` block of each tile is
    compared, so tiles of different sizes can still be scored.

    Args:
        tile_a: 2-D gray array
        tile_b: 2-D gray array

    Returns:
        score in [-1, 1]; 0.0 if either block has zero variance
    """
    a = np.asarray(tile_a, dtype=np.float64)
    b = np.asarray(tile_b, dtype=np.float64)

    rows = min(a.shape[0], b.shape[0])
    cols = min(a.shape[1], b.shape[1])
    if rows == 0 or cols == 0:
        return 0.0

    a = a[:rows, :cols]
    b = b[:rows, :cols]

    # Exact zero-variance check; mean subtraction alone can leave rounding noise
    if np.ptp(a) == 0 or np.ptp(b) == 0:
        return 0.0

    da = a - a.mean()
    db = b - b.mean()

    denom = np.sqrt(np.sum(da * da) * np.sum(db * db))
    if denom == 0:
        return 0.0

    value = float(np.sum(da * db) / denom)
    return max(-1.0, min(1.0, value))
