"""LZ4 compression envelope for container payloads.

Payloads are stored as raw LZ4 blocks without a size prefix; the
uncompressed size lives in the container header and is handed to the
decompressor up front.
"""

from __future__ import annotations

import lz4.block

from ..errors import DecompressionError

__all__ = ["compress", "decompress", "LZ4_HC_LEVEL"]

LZ4_HC_LEVEL = 12


def compress(raw: bytes | bytearray | memoryview) -> bytes:
    return lz4.block.compress(
        bytes(raw),
        mode="high_compression",
        compression=LZ4_HC_LEVEL,
        store_size=False,
    )


def decompress(
    data: bytes | bytearray | memoryview, expected_uncompressed_size: int
) -> bytes:
    if expected_uncompressed_size < 0:
        raise DecompressionError(
            f"Negative uncompressed size {expected_uncompressed_size}"
        )
    if expected_uncompressed_size == 0:
        return b""
    try:
        out = lz4.block.decompress(
            bytes(data), uncompressed_size=expected_uncompressed_size
        )
    except lz4.block.LZ4BlockError as e:
        raise DecompressionError(
            f"Corrupt LZ4 stream: {e}",
            {"compressed": len(data), "expected": expected_uncompressed_size},
        ) from e
    if len(out) != expected_uncompressed_size:
        raise DecompressionError(
            f"Decompressed {len(out)} bytes, expected {expected_uncompressed_size}",
            {"actual": len(out), "expected": expected_uncompressed_size},
        )
    return out
