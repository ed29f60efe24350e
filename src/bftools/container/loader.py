"""Zero-copy loading of BF containers.

``load`` validates the header bytes, decodes the fixed header and returns
a :class:`Container` whose payload is a ``memoryview`` into the caller's
buffer. Nothing is copied and nothing is mutated, so loading is safe to
call concurrently over the same buffer.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..errors import (
    DecompressionError,
    NotEnoughDataOrUnaligned,
    UnexpectedKindError,
)
from .compression import decompress
from .constants import HEADER_SIZE, Kind
from .header import Header, ImageAdditional, unpack_image_additional, validate

__all__ = ["Container", "load", "load_file"]


@dataclass(slots=True, frozen=True)
class Container:
    header: Header
    payload: memoryview

    @property
    def kind(self) -> Kind:
        return self.header.checked_kind

    def image_info(self) -> ImageAdditional:
        if self.kind is not Kind.IMAGE:
            raise UnexpectedKindError(
                f"Expected an image container, found {self.kind.name}",
                {"kind": int(self.kind)},
            )
        return unpack_image_additional(self.header.additional)

    def decompress(self) -> bytes:
        """Decompress the first ``compressed_size`` payload bytes."""
        size = self.header.compressed_size
        if len(self.payload) < size:
            raise DecompressionError(
                f"Payload holds {len(self.payload)} bytes, header records {size}",
                {"actual": len(self.payload), "compressed": size},
            )
        return decompress(self.payload[:size], self.header.uncompressed_size)


def load(data: bytes | bytearray | memoryview) -> Container:
    validate(data)
    if len(data) < HEADER_SIZE:
        raise NotEnoughDataOrUnaligned(
            f"Need {HEADER_SIZE} bytes for header, got {len(data)}",
            {"size": len(data)},
        )
    view = data if isinstance(data, memoryview) else memoryview(data)
    header = Header.unpack(view)
    return Container(header=header, payload=view[HEADER_SIZE:])


def load_file(path: str | Path) -> Container:
    """Read ``path`` fully and load it; the container owns the read bytes."""
    return load(Path(path).read_bytes())
