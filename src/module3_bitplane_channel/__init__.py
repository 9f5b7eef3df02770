"""
Module 3: Bit-Plane Channel

Maps payload bytes onto pixel planes of an RGBA region and back.

Strategies:
    - AlphaLSBChannel: 1 bit/pixel, alpha LSB, rows 0/2/4
    - RGBLSBChannel: 3 bits/pixel, R/G/B LSBs, first/middle/last row
    - BytePlaneChannel: 3 bytes/pixel, whole R/G/B values, tiled across the row

Writes return a modified copy and never touch channels or rows outside
the designated plane.
"""

from .channel import BitPlaneChannel, ChannelKind, Region
from .alpha_lsb import AlphaLSBChannel
from .rgb_lsb import RGBLSBChannel
from .byte_plane import BytePlaneChannel
from .bit_utils import bytes_to_bits, bits_to_bytes
from .carriers import (
    render_strip,
    render_shadow,
    render_hierarchy_shadow,
    composite,
    gradient_alpha,
    STRIP_HEIGHT,
    SHADOW_HEIGHT,
    HIERARCHY_SHADOW_HEIGHT,
)
from .channel_errors import ChannelError, ChannelCapacityError, ChannelRowError


_CHANNELS = {
    ChannelKind.ALPHA_LSB: AlphaLSBChannel,
    ChannelKind.RGB_LSB: RGBLSBChannel,
    ChannelKind.BYTE_PLANE: BytePlaneChannel,
}


def get_channel(kind) -> BitPlaneChannel:
    """Instantiate a channel strategy from a ChannelKind or its string value."""
    return _CHANNELS[ChannelKind(kind)]()


__all__ = [
    'BitPlaneChannel',
    'ChannelKind',
    'Region',
    'AlphaLSBChannel',
    'RGBLSBChannel',
    'BytePlaneChannel',
    'get_channel',
    'bytes_to_bits',
    'bits_to_bytes',
    'render_strip',
    'render_shadow',
    'render_hierarchy_shadow',
    'composite',
    'gradient_alpha',
    'STRIP_HEIGHT',
    'SHADOW_HEIGHT',
    'HIERARCHY_SHADOW_HEIGHT',
    'ChannelError',
    'ChannelCapacityError',
    'ChannelRowError',
]

__version__ = '1.0.0'
