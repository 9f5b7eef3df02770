"""
Module 1: Image I/O

Loads screenshots into the canonical RGBA pixel matrix used by every
other module, writes rendered carriers back to disk, and rejects
missing or corrupt source buffers with InputError.
"""

from typing import Tuple
import numpy as np

from .image_loader import load_image as _load_image, decode_image_bytes, ImageMetadata
from .image_writer import write_image as _write_image, encode_image
from .preprocessing import to_rgba, to_grayscale
from .exceptions import ImageIOError, InputError


# Type alias for Image
Image = np.ndarray  # Shape: (H, W, 4), dtype: uint8, range: [0, 255]


class ImageIO:
    """Image input/output operations"""

    def load_image(self, path: str) -> Tuple[Image, ImageMetadata]:
        """
        Load image from file.

        Args:
            path: Path to image file

        Returns:
            image: RGBA pixel matrix
            metadata: Image metadata

        Raises:
            InputError: If the file is missing or cannot be decoded
        """
        return _load_image(path)

    def write_image(self, image: Image, path: str) -> None:
        """
        Write image to file.

        Args:
            image: RGB or RGBA pixel matrix
            path: Output image path

        Raises:
            InputError: If the image buffer is invalid
            ImageIOError: If write fails
        """
        _write_image(image, path)

    def normalize(self, pixels) -> Image:
        """
        Normalize a decoded pixel buffer to RGBA uint8.

        Raises:
            InputError: If the buffer is missing or malformed
        """
        return to_rgba(pixels)


# Export public interface
__all__ = [
    'ImageIO',
    'ImageMetadata',
    'Image',
    'decode_image_bytes',
    'encode_image',
    'to_rgba',
    'to_grayscale',
    'ImageIOError',
    'InputError',
]

__version__ = '1.0.0'
