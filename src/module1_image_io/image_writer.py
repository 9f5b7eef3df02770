"""
Image writing for the DevTag encoders and test fixtures.
"""

import os

import numpy as np
import cv2

from .exceptions import ImageIOError
from .preprocessing import to_rgba


def write_image(image: np.ndarray, path: str) -> None:
    """
    Write an image to disk.

    The format is chosen by OpenCV from the file extension. PNG keeps
    the alpha channel; formats without alpha drop it.

    Args:
        image: RGB or RGBA uint8 array
        path: Output path

    Raises:
        InputError: If the image buffer is invalid
        ImageIOError: If the write fails
    """
    rgba = to_rgba(image)

    # Create output directory if it doesn't exist
    output_dir = os.path.dirname(path)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir, exist_ok=True)

    ext = os.path.splitext(path)[1].lower()
    bgr = _to_bgr(rgba, keep_alpha=ext in (".png", ".webp", ".tif", ".tiff"))

    try:
        written = cv2.imwrite(path, bgr)
    except cv2.error as e:
        raise ImageIOError(f"Failed to write image: {path} ({e})") from e
    if not written:
        raise ImageIOError(f"Failed to write image: {path}")


def encode_image(image: np.ndarray, ext: str = ".png", quality: int = 95) -> bytes:
    """
    Encode an image to bytes in memory.

    Used to simulate the lossy transports a screenshot goes through
    (JPEG recompression in chat apps, PNG export with alpha).

    Args:
        image: RGB or RGBA uint8 array
        ext: Target format extension (".png", ".jpg", ".webp")
        quality: JPEG/WebP quality in [0, 100]

    Returns:
        data: Encoded bytes

    Raises:
        ValueError: If quality is out of range
        ImageIOError: If encoding fails
    """
    if quality < 0 or quality > 100:
        raise ValueError(f"Invalid quality: {quality}. Must be in range [0, 100].")

    rgba = to_rgba(image)
    ext = ext.lower()
    keep_alpha = ext in (".png", ".webp")

    params = []
    if ext in (".jpg", ".jpeg"):
        params = [cv2.IMWRITE_JPEG_QUALITY, int(quality)]
    elif ext == ".webp":
        params = [cv2.IMWRITE_WEBP_QUALITY, int(quality)]

    ok, buffer = cv2.imencode(ext, _to_bgr(rgba, keep_alpha), params)
    if not ok:
        raise ImageIOError(f"Failed to encode image as {ext}")

    return buffer.tobytes()


def _to_bgr(rgba: np.ndarray, keep_alpha: bool) -> np.ndarray:
    if keep_alpha:
        return cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)
    return cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR)
