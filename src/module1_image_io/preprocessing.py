"""
Pixel buffer normalization for the DevTag decoders.

All downstream modules operate on a single canonical layout: an RGBA
``uint8`` array of shape (H, W, 4). This module converts whatever the
caller hands us into that layout, or raises InputError.
"""

import numpy as np
import cv2

from .exceptions import InputError


# Type alias for Image
Image = np.ndarray  # Shape: (H, W, 4), dtype: uint8, range: [0, 255]


def to_rgba(pixels) -> Image:
    """
    Normalize a pixel buffer to RGBA uint8.

    Accepted inputs:
    - (H, W) grayscale
    - (H, W, 1) grayscale
    - (H, W, 3) RGB (alpha is set to 255)
    - (H, W, 4) RGBA

    Args:
        pixels: Decoded pixel matrix

    Returns:
        image: (H, W, 4) uint8 array. A new array is always returned,
               the caller's buffer is never modified.

    Raises:
        InputError: If the buffer is missing, empty or has an unsupported shape
    """
    if pixels is None:
        raise InputError("Image buffer is missing")

    if not isinstance(pixels, np.ndarray):
        raise InputError(f"Image buffer must be a numpy array, got {type(pixels).__name__}")

    if pixels.size == 0:
        raise InputError(f"Image buffer is empty: shape {pixels.shape}")

    # Convert dtype first so OpenCV colour conversions accept the buffer
    if pixels.dtype != np.uint8:
        if pixels.dtype in [np.float32, np.float64]:
            if not np.all(np.isfinite(pixels)):
                raise InputError("Image buffer contains NaN or Inf values")
            pixels = np.floor(np.clip(pixels, 0, 255))
        else:
            pixels = np.clip(pixels, 0, 255)
        pixels = pixels.astype(np.uint8)

    if pixels.ndim == 2:
        return cv2.cvtColor(np.ascontiguousarray(pixels), cv2.COLOR_GRAY2RGBA)

    if pixels.ndim != 3:
        raise InputError(
            f"Invalid image dimensions: {pixels.ndim}. Expected 2 (H, W) or 3 (H, W, C)."
        )

    channels = pixels.shape[2]

    if channels == 1:
        return cv2.cvtColor(np.ascontiguousarray(pixels[:, :, 0]), cv2.COLOR_GRAY2RGBA)
    elif channels == 3:
        return cv2.cvtColor(np.ascontiguousarray(pixels), cv2.COLOR_RGB2RGBA)
    elif channels == 4:
        return np.ascontiguousarray(pixels).copy()

    raise InputError(
        f"Unsupported number of channels: {channels}. Expected 1, 3, or 4."
    )


def to_grayscale(image: Image) -> np.ndarray:
    """
    Average the R, G and B channels of an RGBA image.

    The mean is kept as float64 (no rounding) so that correlation
    against float reference patterns is not biased by quantization.

    Args:
        image: (H, W, 4) uint8 array

    Returns:
        gray: (H, W) float64 array
    """
    rgb = image[:, :, :3].astype(np.float64)
    return (rgb[:, :, 0] + rgb[:, :, 1] + rgb[:, :, 2]) / 3
