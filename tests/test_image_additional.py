import pytest

from bftools.container import (
    ImageFormat,
    pack_image_additional,
    unpack_image_additional,
)
from bftools.errors import AdditionalRangeError, FormatConversionError


def test_image_additional_bit_positions():
    value = pack_image_additional(0x1234, 0xABCD, ImageFormat.SRGB_DXT5)
    assert value & 0xFFFF == 0x1234
    assert (value >> 16) & 0xFFFF == 0xABCD
    assert (value >> 32) & 0xFF == int(ImageFormat.SRGB_DXT5)
    assert value >> 40 == 0


def test_image_additional_edge_values():
    for width, height in [(0, 0), (1, 0xFFFF), (0xFFFF, 0xFFFF)]:
        for fmt in (ImageFormat.DXT1, ImageFormat.SRGB8_A8):
            info = unpack_image_additional(
                pack_image_additional(width, height, fmt)
            )
            assert (info.width, info.height, info.format) == (width, height, fmt)


def test_image_additional_rejects_oversized_edges():
    with pytest.raises(AdditionalRangeError):
        pack_image_additional(0x10000, 4, ImageFormat.DXT1)
    with pytest.raises(AdditionalRangeError):
        pack_image_additional(4, -1, ImageFormat.DXT1)


def test_image_additional_rejects_unmapped_format():
    with pytest.raises(FormatConversionError):
        pack_image_additional(4, 4, 10)
    with pytest.raises(FormatConversionError):
        unpack_image_additional(10 << 32)


def test_image_additional_ignores_high_bits():
    info = unpack_image_additional((0xFF << 48) | (3 << 32) | (8 << 16) | 16)
    assert info == (16, 8, ImageFormat.RGB8)


def test_image_format_traits():
    assert ImageFormat.DXT1.channels == 3
    assert ImageFormat.DXT5.channels == 4
    assert ImageFormat.SRGB8.is_srgb
    assert not ImageFormat.RGBA8.is_block_compressed
    assert ImageFormat.SRGB_DXT3.is_block_compressed
    assert ImageFormat.from_name("srgb-dxt5") is ImageFormat.SRGB_DXT5
    with pytest.raises(FormatConversionError):
        ImageFormat.from_name("bc7")
