"""
Unit tests for Module 1: Image I/O

Tests cover:
- load_image functionality
- write_image / encode_image functionality
- normalize (to_rgba) functionality
- Error handling and edge cases
"""

import unittest
import numpy as np
import tempfile
import os
import shutil
import cv2

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.module1_image_io import (
    ImageIO,
    ImageMetadata,
    InputError,
    ImageIOError,
    decode_image_bytes,
    encode_image,
    to_rgba,
    to_grayscale,
)


class TestImageIO(unittest.TestCase):
    """Test suite for ImageIO class"""

    def setUp(self):
        """Set up test fixtures"""
        self.image_io = ImageIO()
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up test fixtures"""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def create_test_image(self, filename: str, width: int = 64, height: int = 48, alpha: bool = False) -> str:
        """
        Write a synthetic image with OpenCV (BGR/BGRA order).

        Returns:
            path: Full path to created image
        """
        path = os.path.join(self.temp_dir, filename)
        channels = 4 if alpha else 3
        image = np.zeros((height, width, channels), dtype=np.uint8)
        image[:, :, 0] = 10    # blue
        image[:, :, 1] = 128   # green
        image[:, :, 2] = 250   # red
        if alpha:
            image[:, :, 3] = 77
        cv2.imwrite(path, image)
        return path

    # =========================================================================
    # Tests for load_image
    # =========================================================================

    def test_load_image_rgb(self):
        """Test an RGB PNG is loaded as RGBA with opaque alpha"""
        path = self.create_test_image("rgb.png")

        image, metadata = self.image_io.load_image(path)

        self.assertEqual(image.shape, (48, 64, 4))
        self.assertEqual(image.dtype, np.uint8)
        # BGR on disk -> RGB in memory
        self.assertTrue(np.all(image[:, :, 0] == 250))
        self.assertTrue(np.all(image[:, :, 2] == 10))
        self.assertTrue(np.all(image[:, :, 3] == 255))

        self.assertIsInstance(metadata, ImageMetadata)
        self.assertEqual(metadata.width, 64)
        self.assertEqual(metadata.height, 48)
        self.assertEqual(metadata.source_channels, 3)
        self.assertFalse(metadata.has_alpha)

    def test_load_image_with_alpha(self):
        """Test alpha is preserved from an RGBA PNG"""
        path = self.create_test_image("rgba.png", alpha=True)

        image, metadata = self.image_io.load_image(path)

        self.assertTrue(metadata.has_alpha)
        self.assertTrue(np.all(image[:, :, 3] == 77))

    def test_load_image_grayscale(self):
        path = os.path.join(self.temp_dir, "gray.png")
        cv2.imwrite(path, np.full((10, 12), 99, dtype=np.uint8))

        image, metadata = self.image_io.load_image(path)

        self.assertEqual(image.shape, (10, 12, 4))
        self.assertEqual(metadata.source_channels, 1)
        self.assertTrue(np.all(image[:, :, :3] == 99))

    def test_load_image_16bit(self):
        """Test 16-bit PNGs are reduced to 8 bits"""
        path = os.path.join(self.temp_dir, "deep.png")
        cv2.imwrite(path, np.full((4, 4, 3), 0x8000, dtype=np.uint16))

        image, _ = self.image_io.load_image(path)
        self.assertEqual(image.dtype, np.uint8)
        self.assertTrue(np.all(image[:, :, :3] == 0x80))

    def test_load_image_file_not_found(self):
        """Test that InputError is raised for non-existent file"""
        with self.assertRaises(InputError):
            self.image_io.load_image("nonexistent_image.png")

    def test_load_image_invalid_file(self):
        """Test that InputError is raised for a file that is not an image"""
        invalid_path = os.path.join(self.temp_dir, "invalid.png")
        with open(invalid_path, 'w') as f:
            f.write("This is not an image file")

        with self.assertRaises(InputError):
            self.image_io.load_image(invalid_path)

    def test_load_image_empty_file(self):
        empty_path = os.path.join(self.temp_dir, "empty.png")
        open(empty_path, 'wb').close()

        with self.assertRaisesRegex(InputError, "empty"):
            self.image_io.load_image(empty_path)

    # =========================================================================
    # Tests for write_image / encode_image
    # =========================================================================

    def test_write_png_roundtrip_is_lossless(self):
        """Test PNG keeps every RGBA value, including alpha LSBs"""
        rng = np.random.default_rng(7)
        image = rng.integers(0, 256, size=(20, 30, 4), dtype=np.uint8)
        path = os.path.join(self.temp_dir, "out", "roundtrip.png")

        self.image_io.write_image(image, path)
        loaded, _ = self.image_io.load_image(path)

        np.testing.assert_array_equal(loaded, image)

    def test_write_jpeg_drops_alpha(self):
        image = np.full((16, 16, 4), 200, dtype=np.uint8)
        image[:, :, 3] = 10
        path = os.path.join(self.temp_dir, "flat.jpg")

        self.image_io.write_image(image, path)
        loaded, metadata = self.image_io.load_image(path)

        self.assertEqual(metadata.source_channels, 3)
        self.assertTrue(np.all(loaded[:, :, 3] == 255))

    def test_write_image_unknown_extension(self):
        with self.assertRaises(ImageIOError):
            self.image_io.write_image(np.zeros((4, 4, 4), dtype=np.uint8),
                                      os.path.join(self.temp_dir, "out.unknown"))

    def test_encode_decode_bytes(self):
        rng = np.random.default_rng(3)
        image = rng.integers(0, 256, size=(8, 8, 4), dtype=np.uint8)

        decoded = decode_image_bytes(encode_image(image, ".png"))
        np.testing.assert_array_equal(decoded, image)

    def test_encode_jpeg_is_lossy(self):
        rng = np.random.default_rng(3)
        image = rng.integers(0, 256, size=(32, 32, 3), dtype=np.uint8)

        decoded = decode_image_bytes(encode_image(image, ".jpg", quality=50))
        self.assertEqual(decoded.shape, (32, 32, 4))
        self.assertFalse(np.array_equal(decoded[:, :, :3], image))

    def test_encode_invalid_quality(self):
        with self.assertRaises(ValueError):
            encode_image(np.zeros((4, 4, 3), dtype=np.uint8), ".jpg", quality=101)

    def test_decode_garbage_bytes(self):
        with self.assertRaises(InputError):
            decode_image_bytes(b"\x00\x01\x02 definitely not an image")

    # =========================================================================
    # Tests for normalize
    # =========================================================================

    def test_normalize_rgb(self):
        rgb = np.zeros((5, 6, 3), dtype=np.uint8)
        rgb[:, :, 1] = 42

        rgba = self.image_io.normalize(rgb)

        self.assertEqual(rgba.shape, (5, 6, 4))
        self.assertTrue(np.all(rgba[:, :, 1] == 42))
        self.assertTrue(np.all(rgba[:, :, 3] == 255))

    def test_normalize_gray_2d_and_single_channel(self):
        gray = np.full((3, 4), 17, dtype=np.uint8)
        for pixels in (gray, gray[:, :, None]):
            rgba = to_rgba(pixels)
            self.assertEqual(rgba.shape, (3, 4, 4))
            self.assertTrue(np.all(rgba[:, :, :3] == 17))

    def test_normalize_returns_copy(self):
        rgba = np.zeros((2, 2, 4), dtype=np.uint8)
        out = to_rgba(rgba)
        out[0, 0, 0] = 9
        self.assertEqual(rgba[0, 0, 0], 0)

    def test_normalize_float_is_floored(self):
        pixels = np.full((2, 2, 3), 127.9)
        self.assertTrue(np.all(to_rgba(pixels)[:, :, :3] == 127))

    def test_normalize_invalid_inputs(self):
        """Test every malformed buffer raises InputError"""
        invalid = [
            None,
            [[1, 2], [3, 4]],
            np.zeros((0, 4, 4), dtype=np.uint8),
            np.zeros((2, 2, 2), dtype=np.uint8),
            np.zeros((2, 2, 4, 1), dtype=np.uint8),
            np.full((2, 2, 3), np.nan),
        ]
        for pixels in invalid:
            with self.assertRaises(InputError):
                to_rgba(pixels)

    def test_grayscale_is_channel_mean(self):
        rgba = np.zeros((1, 2, 4), dtype=np.uint8)
        rgba[0, 0, :3] = (10, 20, 31)
        rgba[0, 1, 3] = 255

        gray = to_grayscale(rgba)

        self.assertAlmostEqual(gray[0, 0], 61 / 3)
        self.assertEqual(gray[0, 1], 0.0)


if __name__ == '__main__':
    unittest.main()
