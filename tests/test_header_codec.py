import struct

import pytest

from bftools.container import MAGIC, HEADER_SIZE, Header, Kind, validate
from bftools.container.constants import MAX_KIND
from bftools.errors import (
    InvalidFileSignature,
    InvalidKindValue,
    KindConversionError,
    VersionTooHigh,
)


def _raw(magic=MAGIC, kind=0, version=1) -> bytes:
    return struct.pack("<HBB", magic, kind, version) + bytes(HEADER_SIZE - 4)


def test_header_pack_layout():
    header = Header.new(Kind.MATERIAL, 1, 0x0102030405060708, 1000, 250)
    data = header.pack()
    assert len(data) == HEADER_SIZE == 32
    assert data[0:2] == MAGIC.to_bytes(2, "little")
    assert data[2] == Kind.MATERIAL
    assert data[3] == 1
    assert data[4:8] == b"\x00\x00\x00\x00"
    assert data[8:16] == (0x0102030405060708).to_bytes(8, "little")
    assert data[16:24] == (1000).to_bytes(8, "little")
    assert data[24:32] == (250).to_bytes(8, "little")
    assert Header.unpack(data) == header


def test_header_unpack_ignores_trailing_bytes():
    header = Header.new(Kind.AUDIO, 1, 7, 3, 2)
    assert Header.unpack(header.pack() + b"tail") == header


def test_validate_accepts_every_kind():
    for kind in Kind:
        validate(_raw(kind=kind))


def test_validate_bad_magic():
    with pytest.raises(InvalidFileSignature):
        validate(_raw(magic=MAGIC + 1))


def test_validate_magic_checked_before_kind_and_version():
    with pytest.raises(InvalidFileSignature):
        validate(_raw(magic=0, kind=200, version=99))


def test_validate_kind_out_of_range():
    with pytest.raises(InvalidKindValue):
        validate(_raw(kind=int(MAX_KIND) + 1))
    with pytest.raises(InvalidKindValue):
        validate(_raw(kind=255))


def test_validate_kind_checked_before_version():
    with pytest.raises(InvalidKindValue):
        validate(_raw(kind=255, version=255))


def test_validate_version_too_high():
    validate(_raw(version=0))
    with pytest.raises(VersionTooHigh):
        validate(_raw(version=2))


def test_validate_short_buffer_checks_present_fields_only():
    validate(b"")
    validate(MAGIC.to_bytes(2, "little"))
    with pytest.raises(InvalidFileSignature):
        validate(b"\x00\x00\x00")


def test_kind_try_from():
    assert Kind.try_from(0) is Kind.IMAGE
    assert Kind.try_from(6) is Kind.SCENE
    with pytest.raises(KindConversionError) as ei:
        Kind.try_from(7)
    assert ei.value.code == "E_KIND_UNMAPPED"
