# file: tests/test_bitplane_channel.py

"""
Unit tests for Module 3: Bit-Plane Channel.

Test coverage:
    - Bit/byte conversion
    - Alpha-LSB, RGB-LSB and byte-plane write/read
    - Plane isolation (writes never touch other channels or rows)
    - Capacity and row errors
    - Carrier renderers (strip, shadow, hierarchy shadow)
"""

import numpy as np
import pytest

from src.module2_payload_codec import (
    PayloadCodec,
    DevTagFields,
    HierarchicalFields,
    SchemeId,
)
from src.module3_bitplane_channel import (
    AlphaLSBChannel,
    RGBLSBChannel,
    BytePlaneChannel,
    ChannelKind,
    get_channel,
    bytes_to_bits,
    bits_to_bytes,
    render_strip,
    render_shadow,
    render_hierarchy_shadow,
    composite,
    gradient_alpha,
    STRIP_HEIGHT,
    SHADOW_HEIGHT,
    HIERARCHY_SHADOW_HEIGHT,
    ChannelCapacityError,
    ChannelRowError,
)


FIELDS = DevTagFields(
    view_id="BILLING_02",
    route="/settings/billing",
    sha="abc1234",
    flags=0,
    timestamp=1700000000,
)


def make_region(height, width, seed=0):
    """Random opaque-ish RGBA region."""
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)


@pytest.fixture
def codec():
    return PayloadCodec()


class TestBitConversion:
    """Test MSB-first bit helpers."""

    def test_msb_first(self):
        bits = bytes_to_bits(b"\x80\x01")
        assert bits.tolist() == [1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1]

    def test_trailing_partial_byte_dropped(self):
        bits = np.array([0, 1, 0, 0, 0, 1, 0, 0, 1, 1, 1], dtype=np.uint8)
        assert bits_to_bytes(bits) == b"D"

    def test_empty(self):
        assert len(bytes_to_bits(b"")) == 0
        assert bits_to_bytes(np.array([1, 0, 1], dtype=np.uint8)) == b""


class TestAlphaLSBChannel:
    """Test the alpha least-significant-bit plane."""

    def test_roundtrip_default_rows(self, codec):
        region = make_region(12, 300)
        record = codec.encode(FIELDS)

        written = AlphaLSBChannel().write(region, record)
        for row in (0, 2, 4):
            decoded = codec.decode(AlphaLSBChannel().read_bytes(written, row))
            assert decoded.checksum_valid
            assert decoded.view_id == "BILLING_02"

    def test_only_alpha_lsb_changes(self, codec):
        """Test RGB, the upper alpha bits and undesignated rows are untouched."""
        region = make_region(12, 300)
        written = AlphaLSBChannel().write(region, codec.encode(FIELDS))

        assert np.array_equal(written[:, :, :3], region[:, :, :3])
        assert np.array_equal(written[:, :, 3] >> 1, region[:, :, 3] >> 1)
        for row in (1, 3, 5, 6, 11):
            assert np.array_equal(written[row], region[row])

    def test_write_returns_copy(self, codec):
        region = make_region(6, 300)
        before = region.copy()
        AlphaLSBChannel().write(region, codec.encode(FIELDS))
        assert np.array_equal(region, before)

    def test_capacity_error(self, codec):
        """Test a 264-bit record does not fit a 100 pixel row."""
        with pytest.raises(ChannelCapacityError) as excinfo:
            AlphaLSBChannel().write(make_region(4, 100), codec.encode(FIELDS), rows=[0])
        assert excinfo.value.required_bits == 264
        assert excinfo.value.capacity_bits == 100

    def test_row_outside_region(self, codec):
        with pytest.raises(ChannelRowError, match="outside"):
            AlphaLSBChannel().write(make_region(4, 400), codec.encode(FIELDS), rows=[4])

    def test_short_region_default_rows(self):
        assert AlphaLSBChannel().default_rows(3) == [0, 2]

    def test_scenario_narrow_strip_with_wrapping(self, codec):
        """Test a 100x4 strip carries the full record when rows wrap."""
        channel = AlphaLSBChannel(wrap_rows=True)
        region = np.zeros((4, 100, 4), dtype=np.uint8)
        region[:, :, 3] = 200

        written = channel.write(region, codec.encode(FIELDS))
        decoded = codec.decode(channel.read_bytes(written, 0))

        assert decoded.view_id == "BILLING_02"
        assert decoded.sha == "abc1234"
        assert decoded.checksum_valid is True

    def test_wrapping_single_start_row(self, codec):
        with pytest.raises(ChannelRowError, match="single start row"):
            AlphaLSBChannel(wrap_rows=True).write(make_region(4, 100), b"DTAG", rows=[0, 1])


class TestRGBLSBChannel:
    """Test the R/G/B least-significant-bit planes."""

    def test_default_rows(self):
        channel = RGBLSBChannel()
        assert channel.default_rows(8) == [0, 4, 7]
        assert channel.default_rows(1) == [0]

    def test_roundtrip_with_row_zero_corrupted(self, codec):
        """Test any surviving redundant row recovers the record."""
        record = codec.encode(HierarchicalFields.from_chain(["PAGE", "panel"], "panel"))
        channel = RGBLSBChannel()
        written = channel.write(make_region(8, 120), record)

        written[0, :, :3] ^= 1
        assert not codec.decode(channel.read_bytes(written, 0), scheme=SchemeId.HIERARCHICAL).checksum_valid

        decoded = codec.decode(channel.read_bytes(written, 4), scheme=SchemeId.HIERARCHICAL)
        assert decoded.checksum_valid
        assert decoded.path == "PAGE/panel"

    def test_alpha_untouched(self, codec):
        region = make_region(8, 120)
        written = RGBLSBChannel().write(region, codec.encode(FIELDS))
        assert np.array_equal(written[:, :, 3], region[:, :, 3])
        assert np.array_equal(written[:, :, :3] >> 1, region[:, :, :3] >> 1)

    def test_capacity_is_three_bits_per_pixel(self):
        assert RGBLSBChannel().capacity(make_region(2, 50)) == 150


class TestBytePlaneChannel:
    """Test the whole-value byte plane."""

    def test_payload_tiled_across_row(self, codec):
        record = codec.encode(FIELDS)
        channel = BytePlaneChannel()
        written = channel.write(make_region(4, 40), record, rows=[1])

        row = channel.read_row(written, 1)
        assert len(row) == 3 * 40
        # 33 bytes -> 11 pixels per copy
        assert row[:33] == record
        assert row[33:66] == record
        assert np.all(written[1, :, 3] == make_region(4, 40)[1, :, 3])

    def test_payload_padded_to_whole_pixels(self):
        channel = BytePlaneChannel()
        written = channel.write(make_region(1, 6), b"DTAGx", rows=[0])
        assert channel.read_row(written, 0) == b"DTAGx\x00" * 3

    def test_other_rows_untouched(self, codec):
        region = make_region(4, 40)
        written = BytePlaneChannel().write(region, codec.encode(FIELDS), rows=[2])
        for row in (0, 1, 3):
            assert np.array_equal(written[row], region[row])

    def test_get_channel(self):
        assert isinstance(get_channel("byte_plane"), BytePlaneChannel)
        assert isinstance(get_channel(ChannelKind.ALPHA_LSB), AlphaLSBChannel)

    def test_invalid_region(self):
        with pytest.raises(ValueError, match="RGBA"):
            BytePlaneChannel().write(np.zeros((4, 4, 3), dtype=np.uint8), b"x")


class TestCarriers:
    """Test the rendered carrier strips."""

    def test_strip(self, codec):
        strip = render_strip(FIELDS, width=200)

        assert strip.shape == (STRIP_HEIGHT, 200, 4)
        assert np.all(strip[:, :, 3] == 255)
        for row in range(STRIP_HEIGHT):
            decoded = codec.find_payload(BytePlaneChannel().read_row(strip, row))
            assert decoded is not None
            assert decoded.view_id == "BILLING_02"

    def test_strip_too_narrow(self):
        with pytest.raises(ChannelCapacityError):
            render_strip(FIELDS, width=10)

    def test_shadow(self, codec):
        shadow = render_shadow(FIELDS, width=400)

        assert shadow.shape == (SHADOW_HEIGHT, 400, 4)
        assert np.all(shadow[:, :, :3] == 0)
        # Alpha fades from the top edge to transparent
        assert shadow[0, 0, 3] >> 1 > shadow[-1, 0, 3] >> 1
        decoded = codec.find_payload(AlphaLSBChannel().read_bytes(shadow, 2))
        assert decoded.timestamp == 1700000000

    def test_hierarchy_shadow(self, codec):
        fields = HierarchicalFields.from_chain(["BILLING_PAGE", "metadata-panel"], "panel")
        shadow = render_hierarchy_shadow(fields, width=200)

        assert shadow.shape == (HIERARCHY_SHADOW_HEIGHT, 200, 4)
        for row in (0, 4, 7):
            decoded = codec.decode(RGBLSBChannel().read_bytes(shadow, row), scheme=SchemeId.HIERARCHICAL)
            assert decoded.checksum_valid
            assert decoded.id == "metadata-panel"

    def test_gradient_alpha(self):
        alpha = gradient_alpha(10, ((0.0, 0.2), (1.0, 0.0)))
        assert alpha[0] == round(0.19 * 255)
        assert alpha[-1] == round(0.01 * 255)
        assert np.all(np.diff(alpha.astype(int)) <= 0)

    def test_composite(self, blank_page):
        strip = render_strip(FIELDS, width=blank_page.shape[1])
        page = composite(blank_page, strip, 0, 10)

        assert np.array_equal(page[10:14], strip)
        assert np.array_equal(page[:10], blank_page[:10])

    def test_composite_out_of_bounds(self, blank_page):
        with pytest.raises(ValueError, match="does not fit"):
            composite(blank_page, render_strip(FIELDS, 100), 0, blank_page.shape[0] - 2)
