import os

import pytest

from bftools.container import compress, decompress
from bftools.errors import DecompressionError


def test_compress_empty():
    assert decompress(compress(b""), 0) == b""


def test_compress_redundant_data_shrinks():
    raw = bytes(range(16)) * 4096
    packed = compress(raw)
    assert len(packed) < len(raw) // 10
    assert decompress(packed, len(raw)) == raw


def test_compress_random_data():
    raw = os.urandom(4096)
    assert decompress(compress(raw), len(raw)) == raw


def test_decompress_accepts_memoryview():
    raw = b"abc" * 100
    assert decompress(memoryview(compress(raw)), len(raw)) == raw


def test_decompress_corrupt_stream():
    with pytest.raises(DecompressionError):
        decompress(b"\xff" * 32, 1024)


def test_decompress_size_mismatch():
    raw = b"0123456789" * 100
    packed = compress(raw)
    with pytest.raises(DecompressionError):
        decompress(packed, len(raw) - 10)
    with pytest.raises(DecompressionError):
        decompress(packed, len(raw) + 10)


def test_decompress_negative_size():
    with pytest.raises(DecompressionError):
        decompress(b"", -1)
