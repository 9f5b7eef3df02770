# file: tests/test_pattern_synthesis.py

"""
Unit tests for Module 4: Pattern Synthesis.

Test coverage:
    - Seeded LCG sequence
    - Canonical seed keys
    - Frequency/phase/amplitude derivation
    - Pattern determinism and value ranges
    - Hashed noise tiles
    - Tiled rendering and alpha blending
"""

import math

import numpy as np
import pytest

from src.module2_payload_codec import string_hash
from src.module4_pattern_synthesis import (
    PatternSynthesizer,
    SeededRandom,
    LCG_MODULUS,
    seed_key,
    derive_params,
    perceptual_pattern,
    noise_tile,
    noise_tile_hash,
    tile_hash,
    render_tiled,
    blend_over,
    PAGE_GRAIN,
    NOISE_TEXTURE,
    PatternError,
)


PANEL_KEY = seed_key("PAGE/panel", "panel", 2)


@pytest.fixture
def synth():
    return PatternSynthesizer()


class TestSeededRandom:
    """Test the browser-compatible LCG."""

    def test_first_value_seed_zero(self):
        assert SeededRandom(0).next() == 49297 / 233280

    def test_sequence(self):
        rng = SeededRandom(42)
        state = 42
        for _ in range(10):
            state = (state * 9301 + 49297) % 233280
            assert rng.next() == state / LCG_MODULUS

    def test_range(self):
        rng = SeededRandom(string_hash("anything"))
        values = [rng.next() for _ in range(1000)]
        assert all(0 <= v < 1 for v in values)


class TestSeedKey:
    """Test canonical seed keys."""

    def test_compact_json(self):
        assert seed_key("BILLING_PAGE/metadata-panel", "panel", 2) == \
            '{"p":"BILLING_PAGE/metadata-panel","t":"panel","d":2}'

    def test_non_ascii_kept(self):
        assert seed_key("Zahlung/ü", "row", 1) == '{"p":"Zahlung/ü","t":"row","d":1}'


class TestDeriveParams:
    """Test parameter derivation from a seed."""

    def test_deterministic(self):
        assert derive_params(123456789) == derive_params(123456789)

    def test_low_frequency_band(self):
        for seed in (0, 1, 99162322, 2 ** 32 - 1):
            assert 2 <= derive_params(seed).frequencies[0] <= 6

    def test_small_seed_bands(self):
        params = derive_params(0x00030201)
        f1, f2, f3 = params.frequencies
        assert f1 == 2 + 0x00030201 % 5
        assert f2 == 6 + (0x000302 % 5)
        assert f3 == 12 + (0x0003 % 6)

    def test_high_bit_seed_uses_signed_shift(self):
        """Test seeds with the top bit set follow the signed-shift, truncating-mod arithmetic."""
        seed = 0xFFFFFF00
        params = derive_params(seed)
        # seed >> 8 as signed int32 is -1; -1 % 5 truncates to -1
        assert params.frequencies[1] == 5
        assert params.frequencies[2] == 11

    def test_amplitude_bands(self):
        params = derive_params(string_hash(PANEL_KEY))
        a1, a2, a3 = params.amplitudes
        assert 0.4 <= a1 < 0.7
        assert 0.3 <= a2 < 0.6
        assert 0.3 <= a3 < 0.5
        assert all(0 <= p < 2 * math.pi for p in params.phases)

    def test_phases_drawn_before_amplitudes(self):
        seed = 7
        rng = SeededRandom(seed)
        draws = [rng.next() for _ in range(6)]
        params = derive_params(seed)
        assert params.phases[0] == draws[0] * math.pi * 2
        assert params.amplitudes[0] == 0.4 + draws[3] * 0.3


class TestPerceptualPattern:
    """Test pattern synthesis."""

    def test_determinism(self, synth):
        a = synth.tile(PANEL_KEY, size=64, intensity=0.15)
        b = synth.tile(PANEL_KEY, size=64, intensity=0.15)
        assert np.array_equal(a, b)

    def test_different_keys_differ(self, synth):
        a = synth.tile(PANEL_KEY)
        b = synth.tile(seed_key("PAGE/header", "header", 1))
        assert not np.array_equal(a, b)

    def test_shape_and_dtype(self):
        pattern = perceptual_pattern(PANEL_KEY, 48, 32)
        assert pattern.shape == (32, 48)
        assert pattern.dtype == np.float64

    def test_values_around_baseline(self, synth):
        tile = synth.tile(PANEL_KEY, intensity=0.15)
        # |combined| <= (0.7 + 0.6 + 0.5) / 3
        bound = 0.6 * 0.15 * 255
        assert np.all(np.abs(tile - PAGE_GRAIN) <= bound + 1e-9)

    def test_noise_texture_baseline(self, synth):
        tile = synth.tile(PANEL_KEY, baseline=NOISE_TEXTURE)
        assert abs(tile.mean() - NOISE_TEXTURE) < 10

    def test_quantized_floors_variation(self, synth):
        raw = synth.tile(PANEL_KEY)
        quantized = synth.tile(PANEL_KEY, quantize=True)
        assert np.array_equal(quantized, PAGE_GRAIN + np.floor(raw - PAGE_GRAIN))

    def test_component_tile_uses_seed_key(self, synth):
        assert np.array_equal(synth.component_tile("PAGE/panel", "panel", 2), synth.tile(PANEL_KEY))

    def test_zero_intensity_is_flat(self):
        pattern = perceptual_pattern(PANEL_KEY, 16, intensity=0.0)
        assert np.all(pattern == PAGE_GRAIN)

    def test_invalid_size(self):
        with pytest.raises(PatternError, match="size"):
            perceptual_pattern(PANEL_KEY, 0)

    def test_invalid_intensity(self):
        with pytest.raises(PatternError, match="Intensity"):
            perceptual_pattern(PANEL_KEY, 16, intensity=float('nan'))


class TestNoiseTile:
    """Test hashed noise tiles."""

    def test_formula(self):
        key = "noise-key"
        seed = float(string_hash(key))
        tile = noise_tile(key, tile_size=4, intensity=0.04)
        for y in range(4):
            for x in range(4):
                n = math.fmod(seed * (x + 1) * (y + 1) * 9973, 256) / 256
                assert tile[y, x] == 128 + math.floor((n - 0.5) * 2 * 0.04 * 255)

    def test_range(self):
        tile = noise_tile(PANEL_KEY)
        assert tile.shape == (16, 16)
        assert tile.min() >= 128 - 11 and tile.max() <= 128 + 10

    def test_hash_format(self):
        assert tile_hash(np.array([[1, 2], [3, 4]])) == format(string_hash("1,2,3,4"), 'x')

    def test_hash_determinism(self, synth):
        assert noise_tile_hash(PANEL_KEY) == synth.noise_hash(PANEL_KEY)
        assert noise_tile_hash(PANEL_KEY) != noise_tile_hash(seed_key("PAGE/other", "panel", 2))

    def test_invalid_tile_size(self):
        with pytest.raises(PatternError):
            noise_tile(PANEL_KEY, tile_size=0)


class TestRendering:
    """Test tiled rendering and compositing."""

    def test_render_repeats_tile(self, synth):
        region = synth.render(PANEL_KEY, width=150, height=100, tile_size=64)
        tile = np.clip(synth.tile(PANEL_KEY, 64, quantize=True), 0, 255).astype(np.uint8)

        assert region.shape == (100, 150, 4)
        assert np.all(region[:, :, 3] == 255)
        assert np.array_equal(region[:64, :64, 0], tile)
        assert np.array_equal(region[:64, 64:128, 1], tile)
        assert np.array_equal(region[64:100, :64, 2], tile[:36])

    def test_render_clamps_bright_values(self, synth):
        """Test values above 255 near the page-grain baseline saturate instead of wrapping."""
        tile = synth.tile(PANEL_KEY, 64, quantize=True)
        region = synth.render(PANEL_KEY, width=64, height=64, tile_size=64)

        assert tile.max() > 255
        assert np.all(region[:, :, 0][tile > 255] == 255)
        assert region[:, :, 0].min() == tile.min()

    def test_render_noise(self, synth):
        region = synth.render_noise(PANEL_KEY, 32, 32)
        assert np.array_equal(region[16:32, 16:32, 0], noise_tile(PANEL_KEY).astype(np.uint8))

    def test_render_invalid_alpha(self):
        with pytest.raises(PatternError, match="Alpha"):
            render_tiled(np.zeros((4, 4)), 8, 8, alpha=300)

    def test_blend_over(self, blank_page):
        overlay = render_tiled(np.full((4, 4), 45), 8, 8, alpha=51)
        out = blend_over(blank_page, overlay, x=4, y=4)

        # 45 * 0.2 + 245 * 0.8 = 205
        assert np.all(out[4:12, 4:12, :3] == 205)
        assert np.all(out[:4] == blank_page[:4])
        assert np.all(out[:, :, 3] == 255)

    def test_blend_over_out_of_bounds(self, blank_page):
        with pytest.raises(PatternError, match="does not fit"):
            blend_over(blank_page, render_tiled(np.zeros((4, 4)), 8, 8), x=blank_page.shape[1] - 4)
