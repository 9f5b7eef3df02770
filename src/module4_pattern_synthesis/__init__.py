"""
Module 4: Pattern Synthesis

Deterministic grayscale patterns keyed by a component's seed key.

Public Interface:
    - PatternSynthesizer: tile / component_tile / noise_tile / noise_hash / render
    - seed_key(path, type, depth) -> str
    - SeededRandom: browser-compatible LCG
    - PAGE_GRAIN, NOISE_TEXTURE: gray baselines

Example usage:
    >>> from src.module4_pattern_synthesis import PatternSynthesizer, seed_key
    >>> synth = PatternSynthesizer()
    >>> tile = synth.tile(seed_key("PAGE/panel", "panel", 2), size=64, intensity=0.15)
    >>> tile.shape
    (64, 64)
"""

from .synthesizer import PatternSynthesizer
from .seed_keys import seed_key
from .seeded_random import SeededRandom, LCG_MULTIPLIER, LCG_INCREMENT, LCG_MODULUS
from .perceptual import (
    perceptual_pattern,
    derive_params,
    PatternParams,
    PAGE_GRAIN,
    NOISE_TEXTURE,
)
from .noise_tile import noise_tile, noise_tile_hash, tile_hash
from .renderer import render_tiled, blend_over
from .pattern_errors import PatternError

__all__ = [
    "PatternSynthesizer",
    "seed_key",
    "SeededRandom",
    "LCG_MULTIPLIER",
    "LCG_INCREMENT",
    "LCG_MODULUS",
    "perceptual_pattern",
    "derive_params",
    "PatternParams",
    "PAGE_GRAIN",
    "NOISE_TEXTURE",
    "noise_tile",
    "noise_tile_hash",
    "tile_hash",
    "render_tiled",
    "blend_over",
    "PatternError",
]

__version__ = "1.0.0"
