"""BF container constants and the closed kind / image-format tag sets."""

from __future__ import annotations

from enum import IntEnum
import struct

from ..errors import FormatConversionError, KindConversionError

__all__ = [
    "MAGIC",
    "MAX_SUPPORTED_VERSION",
    "CURRENT_VERSION",
    "HEADER_FORMAT",
    "HEADER_SIZE",
    "MIN_MIP_SIZE",
    "BLOCK_SIZE",
    "Kind",
    "MAX_KIND",
    "ImageFormat",
    "BlockCodec",
]

MAGIC = 7667
MAX_SUPPORTED_VERSION = 1
CURRENT_VERSION = 1

# magic, kind, version, reserved, additional, uncompressed, compressed
HEADER_FORMAT = "<HBBIQQQ"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)

# Smallest edge a mip level may have; also the DXT block edge.
MIN_MIP_SIZE = 4
BLOCK_SIZE = 4


class Kind(IntEnum):
    IMAGE = 0
    GEOMETRY = 1
    AUDIO = 2
    MATERIAL = 3
    VIRTUAL_FILE_SYSTEM = 4
    COMPILED_SHADER = 5
    SCENE = 6

    @classmethod
    def try_from(cls, value: int) -> "Kind":
        try:
            return cls(value)
        except ValueError:
            raise KindConversionError(
                f"Kind ordinal {value} has no mapping", {"value": value}
            ) from None


# Validity ceiling used by header validation; must move with Kind.
MAX_KIND = max(Kind)


class BlockCodec(IntEnum):
    NONE = 0
    DXT1 = 1
    DXT3 = 3
    DXT5 = 5


class ImageFormat(IntEnum):
    DXT1 = 0
    DXT3 = 1
    DXT5 = 2
    RGB8 = 3
    RGBA8 = 4
    SRGB_DXT1 = 5
    SRGB_DXT3 = 6
    SRGB_DXT5 = 7
    SRGB8 = 8
    SRGB8_A8 = 9

    @classmethod
    def try_from(cls, value: int) -> "ImageFormat":
        try:
            return cls(value)
        except ValueError:
            raise FormatConversionError(
                f"Image format ordinal {value} has no mapping",
                {"value": value},
            ) from None

    @classmethod
    def from_name(cls, name: str) -> "ImageFormat":
        key = name.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise FormatConversionError(
                f"Unknown image format '{name}'", {"name": name}
            ) from None

    @property
    def channels(self) -> int:
        return _FORMAT_TRAITS[self][0]

    @property
    def codec(self) -> BlockCodec:
        return _FORMAT_TRAITS[self][1]

    @property
    def is_srgb(self) -> bool:
        return _FORMAT_TRAITS[self][2]

    @property
    def is_block_compressed(self) -> bool:
        return self.codec is not BlockCodec.NONE


# format -> (channels, block codec, srgb)
_FORMAT_TRAITS = {
    ImageFormat.DXT1: (3, BlockCodec.DXT1, False),
    ImageFormat.DXT3: (4, BlockCodec.DXT3, False),
    ImageFormat.DXT5: (4, BlockCodec.DXT5, False),
    ImageFormat.RGB8: (3, BlockCodec.NONE, False),
    ImageFormat.RGBA8: (4, BlockCodec.NONE, False),
    ImageFormat.SRGB_DXT1: (3, BlockCodec.DXT1, True),
    ImageFormat.SRGB_DXT3: (4, BlockCodec.DXT3, True),
    ImageFormat.SRGB_DXT5: (4, BlockCodec.DXT5, True),
    ImageFormat.SRGB8: (3, BlockCodec.NONE, True),
    ImageFormat.SRGB8_A8: (4, BlockCodec.NONE, True),
}
