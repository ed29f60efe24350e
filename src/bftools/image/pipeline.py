"""Image to BF container conversion.

Stages run strictly in order, each a pure transform of the previous
stage's output:

    load -> orient -> channels -> mipmaps -> encode -> compress -> save

Every stage runs inside a reporter task (which yields the per-stage
timings) and any failure is re-raised as :class:`ConversionError`
tagged with the stage name. The container is only written once all
encoding succeeded, and then atomically.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Tuple
import time

import numpy as np
from PIL import Image

from ..container.compression import compress
from ..container.constants import CURRENT_VERSION, ImageFormat, Kind
from ..container.header import Header, pack_image_additional
from ..errors import BfError, ConversionError
from ..logging import get_logger
from ..reporting import get_reporter, task
from ..utils.io import write_atomic
from .dxt import encode_blocks
from .mipmaps import generate_mipmaps

__all__ = [
    "STAGES",
    "ImageConvertOptions",
    "ConversionResult",
    "load_image",
    "orient",
    "reconcile_channels",
    "encode_level",
    "build_payload",
    "build_container",
    "convert_image",
]

STAGES = ("load", "orient", "channels", "mipmaps", "encode", "compress", "save")

_CHANNEL_MODES = {3: "RGB", 4: "RGBA"}

# Width and height are stored as u16 in the header.
_MAX_EDGE = 0xFFFF

_STAGE_ERRORS = (
    BfError,
    OSError,
    ValueError,
    MemoryError,
    Image.DecompressionBombError,
)


@dataclass(slots=True)
class ImageConvertOptions:
    input_path: Path
    output_path: Path
    format: ImageFormat = ImageFormat.DXT5
    vflip: bool = True


@dataclass(slots=True)
class ConversionResult:
    output_file: Path
    width: int
    height: int
    format: ImageFormat
    levels: int
    uncompressed: int
    compressed: int
    bytes_written: int
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def ratio(self) -> float:
        """Compressed size as a percentage of the raw payload."""
        if not self.uncompressed:
            return 0.0
        return 100.0 * self.compressed / self.uncompressed


def load_image(path: str | Path) -> Image.Image:
    with Image.open(path) as img:
        img.load()
        return img.copy()


def orient(image: Image.Image, vflip: bool = True) -> Image.Image:
    if not vflip:
        return image
    return image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)


def reconcile_channels(image: Image.Image, fmt: ImageFormat) -> Image.Image:
    """Bring ``image`` to the channel layout ``fmt`` stores.

    More channels than needed drops to RGB; fewer expands to the format's
    layout (opaque alpha for four-channel formats). A matching layout is
    returned as is.
    """
    have = len(image.getbands())
    need = fmt.channels
    target = _CHANNEL_MODES[need]
    if image.mode == target:
        return image
    if have > need:
        return image.convert("RGB")
    return image.convert(target)


def encode_level(image: Image.Image, fmt: ImageFormat) -> bytes:
    if not fmt.is_block_compressed:
        return image.tobytes()
    # sRGB and linear variants share the block encoding.
    return encode_blocks(np.asarray(image, dtype=np.uint8), fmt.codec)


def build_payload(levels: List[Image.Image], fmt: ImageFormat) -> bytes:
    rep = get_reporter()
    chunks: List[bytes] = []
    for level in levels:
        chunks.append(encode_level(level, fmt))
        w, h = level.size
        rep.advance("image.encode", current_item=f"{w}x{h}")
    return b"".join(chunks)


def build_container(
    payload: bytes, width: int, height: int, fmt: ImageFormat
) -> Tuple[Header, bytes]:
    """Compress ``payload`` and prefix it with its image header."""
    compressed = compress(payload)
    header = Header.new(
        Kind.IMAGE,
        CURRENT_VERSION,
        pack_image_additional(width, height, fmt),
        len(payload),
        len(compressed),
    )
    return header, header.pack() + compressed


@contextmanager
def _stage(
    name: str, title: str, timings: Dict[str, float], total: int | None = None
) -> Iterator[Dict]:
    started = time.perf_counter()
    try:
        with task(f"image.{name}", title, total) as meta:
            yield meta
    except ConversionError:
        raise
    except _STAGE_ERRORS as e:
        detail = e.message if isinstance(e, BfError) else str(e)
        raise ConversionError(name, f"{title} failed: {detail}") from e
    finally:
        timings[name] = time.perf_counter() - started


def convert_image(options: ImageConvertOptions) -> ConversionResult:
    logger = get_logger()
    fmt = options.format
    timings: Dict[str, float] = {}

    with _stage("load", "Load image", timings) as meta:
        image = load_image(options.input_path)
        width, height = image.size
        meta["size"] = f"{width}x{height}"
        if width > _MAX_EDGE or height > _MAX_EDGE:
            raise ValueError(
                f"{width}x{height} exceeds the {_MAX_EDGE} pixel edge limit"
            )
    logger.debug(
        "Loaded %s mode=%s bands=%d",
        options.input_path,
        image.mode,
        len(image.getbands()),
    )
    with _stage("orient", "Orientation", timings):
        image = orient(image, options.vflip)
    with _stage("channels", "Channel reconciliation", timings):
        image = reconcile_channels(image, fmt)
    with _stage("mipmaps", "Generate mipmaps", timings) as meta:
        levels = generate_mipmaps(image)
        meta["levels"] = len(levels)
    with _stage("encode", f"Encode {fmt.name}", timings, total=len(levels)) as meta:
        payload = build_payload(levels, fmt)
        meta["bytes"] = len(payload)
    with _stage("compress", "LZ4 compress", timings) as meta:
        header, data = build_container(payload, width, height, fmt)
        meta["bytes"] = header.compressed_size
        meta["ratio"] = f"{100.0 * header.compressed_size / max(1, len(payload)):.1f}%"
    with _stage("save", "Save container", timings) as meta:
        written = write_atomic(options.output_path, data)
        meta["bytes"] = written

    return ConversionResult(
        output_file=options.output_path,
        width=width,
        height=height,
        format=fmt,
        levels=len(levels),
        uncompressed=header.uncompressed_size,
        compressed=header.compressed_size,
        bytes_written=written,
        timings=timings,
    )
