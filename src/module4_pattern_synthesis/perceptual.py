"""
Perceptual frequency patterns.


A pattern is the sum of three seed-keyed sinusoids (horizontal, vertical
and diagonal) added to a flat gray baseline. What identifies a component
is the frequency/phase structure, which survives resampling and JPEG
compression far better than exact pixel values.


Seed derivation mirrors the browser encoder, including its integer quirks:
``seed >> 8`` is a signed 32-bit shift and ``%`` truncates toward zero, so
seeds with the top bit set can push the mid/high frequencies below their
nominal bands. Changing this would break matching against patterns rendered
by the browser.
"""


import math
from dataclasses import dataclass
from typing import Tuple


import numpy as np


from src.module2_payload_codec import string_hash, to_int32


from .pattern_errors import PatternError
from .seeded_random import SeededRandom


PAGE_GRAIN = 245       # light page-grain baseline
NOISE_TEXTURE = 128    # mid-gray noise-texture baseline


@dataclass(frozen=True)
class PatternParams:
    """Frequency, phase and amplitude of the three components."""
    frequencies: Tuple[int, int, int]
    phases: Tuple[float, float, float]
    amplitudes: Tuple[float, float, float]
    seed: int


def _js_mod(value: int, modulus: int) -> int:
    """Remainder with the sign of the dividend (JavaScript ``%``)."""
    return int(math.fmod(value, modulus))


def derive_params(seed: int) -> PatternParams:
    """
    Derive the pattern parameters of a 32-bit seed.


    The LCG is seeded once and drawn six times: three phases, then three
    amplitudes.
    """
    signed = to_int32(seed)


    freq1 = 2 + seed % 5
    freq2 = 6 + _js_mod(signed >> 8, 5)
    freq3 = 12 + _js_mod(signed >> 16, 6)


    rng = SeededRandom(seed)


    phase1 = rng.next() * math.pi * 2
    phase2 = rng.next() * math.pi * 2
    phase3 = rng.next() * math.pi * 2


    amp1 = 0.4 + rng.next() * 0.3
    amp2 = 0.3 + rng.next() * 0.3
    amp3 = 0.3 + rng.next() * 0.2


    return PatternParams(
        frequencies=(freq1, freq2, freq3),
        phases=(phase1, phase2, phase3),
        amplitudes=(amp1, amp2, amp3),
        seed=seed,
    )


def combined_signal(params: PatternParams, width: int, height: int) -> np.ndarray:
    """
    Average of the three sinusoids over a width x height grid.


    Returns:
        signal: (height, width) float64 array in roughly [-0.6, 0.6]
    """
    f1, f2, f3 = params.frequencies
    p1, p2, p3 = params.phases
    a1, a2, a3 = params.amplitudes


    xs = np.arange(width, dtype=np.float64)[None, :] / width
    ys = np.arange(height, dtype=np.float64)[:, None] / height


    val1 = np.sin(xs * f1 * math.pi * 2 + p1) * a1
    val2 = np.sin(ys * f2 * math.pi * 2 + p2) * a2
    val3 = np.sin((xs + ys) * f3 * math.pi * 2 + p3) * a3


    return (val1 + val2 + val3) / 3


def perceptual_pattern(
    key: str,
    width: int,
    height: int = None,
    intensity: float = 0.08,
    baseline: int = PAGE_GRAIN,
    quantize: bool = False
) -> np.ndarray:
    """
    Synthesize the grayscale pattern of a seed key.


    Args:
        key: Seed key (see seed_key)
        width: Pattern width in pixels
        height: Pattern height (None = square)
        intensity: Variation scale; 0.15 is the usual on-screen value
        baseline: Gray level the variation is added to
        quantize: If True, floor the variation as the renderer does,
                  giving the exact integer gray values written to pixels


    Returns:
        pattern: (height, width) float64 array


    Raises:
        PatternError: If the size or intensity is invalid
    """
    height = width if height is None else height
    _validate(width, height, intensity)


    params = derive_params(string_hash(key))
    variation = combined_signal(params, width, height) * intensity * 255


    if quantize:
        variation = np.floor(variation)


    return baseline + variation


def _validate(width: int, height: int, intensity: float) -> None:
    if width <= 0 or height <= 0:
        raise PatternError(f"Pattern size must be positive, got {width}x{height}")
    if not math.isfinite(intensity) or intensity < 0:
        raise PatternError(f"Intensity must be a finite non-negative number, got {intensity}")
