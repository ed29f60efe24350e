"""Mipmap chain generation."""

from __future__ import annotations

from typing import List, Tuple

from PIL import Image

from ..container.constants import MIN_MIP_SIZE

__all__ = ["mip_dimensions", "generate_mipmaps"]


def mip_dimensions(width: int, height: int) -> List[Tuple[int, int]]:
    """Sizes of every chain level, largest first.

    Each level halves both edges (rounded down); the chain stops before
    either edge would drop below ``MIN_MIP_SIZE``.
    """
    dims = [(width, height)]
    while min(width, height) // 2 >= MIN_MIP_SIZE:
        width //= 2
        height //= 2
        dims.append((width, height))
    return dims


def generate_mipmaps(image: Image.Image) -> List[Image.Image]:
    levels = [image]
    current = image
    for size in mip_dimensions(*image.size)[1:]:
        # Derive from the parent level, not the source.
        current = current.resize(size, Image.Resampling.LANCZOS)
        levels.append(current)
    return levels
