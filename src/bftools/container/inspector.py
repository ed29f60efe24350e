"""BF container inspection utilities.

Public functions:
- inspect_container(path) -> dict
- validate_container(info) -> list[str]

``inspect_container`` raises for containers the loader rejects outright;
softer inconsistencies (payload length, reserved bits, corrupt payload)
are recorded in the result and turned into issues by
``validate_container``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from ..errors import BfError
from .constants import Kind
from .loader import load

__all__ = ["inspect_container", "inspect_bytes", "validate_container"]


def inspect_bytes(data: bytes) -> Dict[str, Any]:
    container = load(data)
    header = container.header
    kind = container.kind
    result: Dict[str, Any] = {
        "file_size": len(data),
        "header": {
            "magic": header.magic,
            "kind": int(kind),
            "kind_name": kind.name,
            "version": header.version,
            "reserved": header.reserved,
            "additional": header.additional,
            "uncompressed": header.uncompressed_size,
            "compressed": header.compressed_size,
        },
        "payload_size": len(container.payload),
    }
    if kind is Kind.IMAGE:
        info = container.image_info()
        result["image"] = {
            "width": info.width,
            "height": info.height,
            "format": info.format.name,
            "srgb": info.format.is_srgb,
        }
    try:
        payload = container.decompress()
    except BfError as e:
        result["decompress"] = {"ok": False, "error": e.message}
    else:
        result["decompress"] = {"ok": True, "size": len(payload)}
    return result


def inspect_container(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    result = inspect_bytes(p.read_bytes())
    result["path"] = str(p)
    return result


def validate_container(info: Dict[str, Any]) -> List[str]:
    issues: List[str] = []
    header = info["header"]
    if header["reserved"] != 0:
        issues.append("Reserved header field is not zero")
    if info["payload_size"] != header["compressed"]:
        issues.append(
            "Payload size mismatch: "
            f"header={header['compressed']} actual={info['payload_size']}"
        )
    dec = info.get("decompress", {})
    if not dec.get("ok"):
        issues.append(f"Payload decompression failed: {dec.get('error')}")
    return issues
