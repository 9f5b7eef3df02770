"""
Image loading for the DevTag decoders.

Screenshots are read with OpenCV and returned as RGBA arrays together
with a small metadata record.
"""

from typing import Tuple
from dataclasses import dataclass
import os

import numpy as np
import cv2

from .exceptions import InputError
from .preprocessing import to_rgba, Image


@dataclass
class ImageMetadata:
    """Metadata for a loaded screenshot"""
    width: int
    height: int
    source_channels: int  # channels present in the file before normalization
    has_alpha: bool
    path: str


def load_image(path: str) -> Tuple[Image, ImageMetadata]:
    """
    Load an image file as RGBA.

    Args:
        path: Path to a PNG/JPEG/WebP/... file readable by OpenCV

    Returns:
        image: (H, W, 4) uint8 RGBA array
        metadata: ImageMetadata

    Raises:
        InputError: If the file doesn't exist or cannot be decoded
    """
    if not os.path.exists(path):
        raise InputError(f"Image file not found: {path}")

    with open(path, 'rb') as f:
        data = f.read()

    image, channels = _decode(data, source=path)

    metadata = ImageMetadata(
        width=image.shape[1],
        height=image.shape[0],
        source_channels=channels,
        has_alpha=channels == 4,
        path=path,
    )

    return image, metadata


def decode_image_bytes(data: bytes) -> Image:
    """
    Decode an in-memory encoded image (PNG, JPEG, ...) to RGBA.

    Args:
        data: Encoded image bytes

    Returns:
        image: (H, W, 4) uint8 RGBA array

    Raises:
        InputError: If the bytes are empty or not a decodable image
    """
    image, _ = _decode(data, source="<bytes>")
    return image


def _decode(data: bytes, source: str) -> Tuple[Image, int]:
    """Decode raw file bytes, returning the RGBA image and source channel count."""
    if not data:
        raise InputError(f"Image data is empty: {source}")

    buffer = np.frombuffer(data, dtype=np.uint8)
    decoded = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)

    if decoded is None:
        raise InputError(f"Unable to decode image: {source}. Format may be unsupported.")

    # 16-bit PNGs are reduced to 8 bits per channel
    if decoded.dtype == np.uint16:
        decoded = (decoded >> 8).astype(np.uint8)

    if decoded.ndim == 2:
        return to_rgba(decoded), 1

    channels = decoded.shape[2]

    # OpenCV decodes to BGR(A); convert to RGB(A) before normalization
    if channels == 3:
        decoded = cv2.cvtColor(decoded, cv2.COLOR_BGR2RGB)
    elif channels == 4:
        decoded = cv2.cvtColor(decoded, cv2.COLOR_BGRA2RGBA)

    return to_rgba(decoded), channels
