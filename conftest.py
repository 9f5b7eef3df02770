"""
Shared pytest fixtures.

Keeps the repository root importable so tests can use ``from src.moduleN``.
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


@pytest.fixture
def rng():
    """Deterministic random generator for synthetic images."""
    return np.random.default_rng(1234)


@pytest.fixture
def blank_page():
    """Opaque 256x320 RGBA page in the default page-grain gray."""
    image = np.full((256, 320, 4), 245, dtype=np.uint8)
    image[:, :, 3] = 255
    return image


@pytest.fixture
def noisy_page(rng):
    """Opaque 200x300 RGBA page of uniform noise (no payload)."""
    image = rng.integers(0, 256, size=(200, 300, 4), dtype=np.uint8)
    image[:, :, 3] = 255
    return image
