"""Pure binary packing for the BF container header.

The wire layout (all little-endian) is the only source of truth; the
header is encoded and decoded field by field with :mod:`struct`, never by
reinterpreting an in-memory record.

    offset  size  field
    0       2     magic
    2       1     kind
    3       1     version
    4       4     reserved (zero on write, ignored on read)
    8       8     additional (kind dependent)
    16      8     uncompressed size
    24      8     compressed size
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple
import struct

from ..errors import (
    AdditionalRangeError,
    InvalidFileSignature,
    InvalidKindValue,
    NotEnoughDataOrUnaligned,
    VersionTooHigh,
)
from .constants import (
    HEADER_FORMAT,
    HEADER_SIZE,
    MAGIC,
    MAX_KIND,
    MAX_SUPPORTED_VERSION,
    ImageFormat,
    Kind,
)

__all__ = [
    "Header",
    "ImageAdditional",
    "validate",
    "pack_image_additional",
    "unpack_image_additional",
]

_U16_MAX = 0xFFFF
_U64_MAX = 0xFFFF_FFFF_FFFF_FFFF

# Image additional field bit ranges.
_WIDTH_SHIFT = 0
_HEIGHT_SHIFT = 16
_FORMAT_SHIFT = 32
_U16_MASK = 0xFFFF
_U8_MASK = 0xFF


@dataclass(slots=True, frozen=True)
class Header:
    magic: int
    kind: int
    version: int
    reserved: int
    additional: int
    uncompressed_size: int
    compressed_size: int

    @classmethod
    def new(
        cls,
        kind: Kind | int,
        version: int,
        additional: int,
        uncompressed_size: int,
        compressed_size: int,
    ) -> "Header":
        # Trusted producer: nothing is validated here.
        return cls(
            magic=MAGIC,
            kind=int(kind),
            version=version,
            reserved=0,
            additional=additional,
            uncompressed_size=uncompressed_size,
            compressed_size=compressed_size,
        )

    def pack(self) -> bytes:
        data = struct.pack(
            HEADER_FORMAT,
            self.magic,
            self.kind,
            self.version,
            self.reserved,
            self.additional,
            self.uncompressed_size,
            self.compressed_size,
        )
        if len(data) != HEADER_SIZE:  # pragma: no cover
            raise RuntimeError(f"Header size mismatch: {len(data)}")
        return data

    @classmethod
    def unpack(cls, data: bytes | bytearray | memoryview) -> "Header":
        if len(data) < HEADER_SIZE:
            raise NotEnoughDataOrUnaligned(
                f"Need {HEADER_SIZE} bytes for header, got {len(data)}",
                {"size": len(data)},
            )
        return cls(*struct.unpack_from(HEADER_FORMAT, data, 0))

    @property
    def checked_kind(self) -> Kind:
        return Kind.try_from(self.kind)


def validate(data: bytes | bytearray | memoryview) -> None:
    """Check magic, kind and version of raw container bytes, in that order.

    Each check only runs when its bytes are present; a buffer too short
    for the remaining fields is left to the loader's length check.
    """
    if len(data) >= 2:
        (magic,) = struct.unpack_from("<H", data, 0)
        if magic != MAGIC:
            raise InvalidFileSignature(
                f"Expected magic {MAGIC}, found {magic}", {"magic": magic}
            )
    if len(data) >= 3:
        kind = data[2]
        if kind > MAX_KIND:
            raise InvalidKindValue(
                f"Kind {kind} exceeds maximum {int(MAX_KIND)}", {"kind": kind}
            )
    if len(data) >= 4:
        version = data[3]
        if version > MAX_SUPPORTED_VERSION:
            raise VersionTooHigh(
                f"Version {version} exceeds supported {MAX_SUPPORTED_VERSION}",
                {"version": version},
            )


class ImageAdditional(NamedTuple):
    width: int
    height: int
    format: ImageFormat


def pack_image_additional(
    width: int, height: int, format: ImageFormat | int
) -> int:
    """Pack image metadata: width bits 0-15, height 16-31, format 32-39."""
    for label, value in (("width", width), ("height", height)):
        if not 0 <= value <= _U16_MAX:
            raise AdditionalRangeError(
                f"Image {label} {value} does not fit 16 bits", {label: value}
            )
    fmt = ImageFormat.try_from(int(format))
    packed = (
        (width << _WIDTH_SHIFT)
        | (height << _HEIGHT_SHIFT)
        | (int(fmt) << _FORMAT_SHIFT)
    )
    return packed & _U64_MAX


def unpack_image_additional(value: int) -> ImageAdditional:
    width = (value >> _WIDTH_SHIFT) & _U16_MASK
    height = (value >> _HEIGHT_SHIFT) & _U16_MASK
    fmt = ImageFormat.try_from((value >> _FORMAT_SHIFT) & _U8_MASK)
    return ImageAdditional(width, height, fmt)
