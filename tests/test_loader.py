import pytest

from bftools.container import (
    HEADER_SIZE,
    Header,
    ImageFormat,
    Kind,
    compress,
    load,
    load_file,
    pack_image_additional,
)
from bftools.errors import (
    DecompressionError,
    InvalidFileSignature,
    InvalidKindValue,
    NotEnoughDataOrUnaligned,
    UnexpectedKindError,
    VersionTooHigh,
)


def _container(kind=Kind.IMAGE, raw=b"pixels" * 20) -> bytes:
    payload = compress(raw)
    additional = pack_image_additional(8, 4, ImageFormat.RGBA8)
    header = Header.new(kind, 1, additional, len(raw), len(payload))
    return header.pack() + payload


def test_load_valid_container():
    data = _container()
    c = load(data)
    assert c.kind is Kind.IMAGE
    assert c.header.compressed_size == len(data) - HEADER_SIZE
    assert bytes(c.payload) == data[HEADER_SIZE:]
    assert c.decompress() == b"pixels" * 20
    info = c.image_info()
    assert (info.width, info.height, info.format) == (8, 4, ImageFormat.RGBA8)


def test_load_payload_is_a_view_into_input():
    data = bytearray(_container())
    c = load(data)
    assert c.payload.obj is data
    data[HEADER_SIZE] ^= 0xFF
    assert c.payload[0] == data[HEADER_SIZE]


def test_load_header_only():
    data = Header.new(Kind.SCENE, 1, 0, 0, 0).pack()
    c = load(data)
    assert len(c.payload) == 0
    assert c.decompress() == b""


def test_load_truncated_header():
    data = _container()
    for n in range(4, HEADER_SIZE):
        with pytest.raises(NotEnoughDataOrUnaligned):
            load(data[:n])
    with pytest.raises(NotEnoughDataOrUnaligned):
        load(b"")


def test_load_three_zero_bytes_is_bad_signature():
    with pytest.raises(InvalidFileSignature):
        load(bytes([0, 0, 0]))


def test_load_rejects_newer_version():
    data = bytearray(_container())
    data[3] = 2
    with pytest.raises(VersionTooHigh):
        load(data)


def test_image_info_on_other_kind():
    c = load(_container(kind=Kind.AUDIO))
    with pytest.raises(UnexpectedKindError):
        c.image_info()


def test_load_file(tmp_path):
    p = tmp_path / "a.bf"
    p.write_bytes(_container())
    assert load_file(p).kind is Kind.IMAGE


def test_load_error_to_dict():
    with pytest.raises(InvalidFileSignature) as ei:
        load(b"\x01\x02" + bytes(30))
    d = ei.value.to_dict()
    assert d["code"] == "E_SIGNATURE"
    assert d["context"] == {"magic": 0x0201}


def test_decompress_ignores_bytes_after_payload():
    data = _container(kind=Kind.AUDIO) + b"\x00" * 4
    c = load(data)
    assert len(c.payload) == c.header.compressed_size + 4
    assert c.decompress() == b"pixels" * 20


def test_decompress_payload_shorter_than_header_size():
    data = _container()
    c = load(data[:-3])
    with pytest.raises(DecompressionError):
        c.decompress()


def test_load_kind_255_is_invalid_kind():
    data = bytearray(_container())
    data[2] = 255
    with pytest.raises(InvalidKindValue):
        load(data)
