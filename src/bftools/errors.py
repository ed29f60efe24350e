"""Error definitions for bftools.

Every failure surfaced by the library is a :class:`BfError` carrying a
stable ``code`` so callers (and the CLI) can report it uniformly.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_SIGNATURE = "E_SIGNATURE"
E_KIND = "E_KIND"
E_VERSION = "E_VERSION"
E_SHORT = "E_SHORT"
E_KIND_UNMAPPED = "E_KIND_UNMAPPED"
E_FORMAT_UNMAPPED = "E_FORMAT_UNMAPPED"
E_RANGE = "E_RANGE"
E_KIND_MISMATCH = "E_KIND_MISMATCH"
E_DECOMPRESS = "E_DECOMPRESS"
E_NOT_FOUND = "E_NOT_FOUND"
E_IO = "E_IO"
E_CONVERT = "E_CONVERT"
E_MANIFEST = "E_MANIFEST"


@dataclass
class BfError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class LoadError(BfError):
    """Container bytes rejected while loading."""


class InvalidFileSignature(LoadError):
    def __init__(
        self,
        message: str = "Invalid file signature",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(E_SIGNATURE, message, context)


class InvalidKindValue(LoadError):
    def __init__(
        self,
        message: str = "Invalid kind value",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(E_KIND, message, context)


class VersionTooHigh(LoadError):
    def __init__(
        self,
        message: str = "Version too high",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(E_VERSION, message, context)


class NotEnoughDataOrUnaligned(LoadError):
    def __init__(
        self,
        message: str = "Not enough data for header",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(E_SHORT, message, context)


class KindConversionError(BfError):
    def __init__(
        self,
        message: str = "Kind ordinal has no mapping",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(E_KIND_UNMAPPED, message, context)


class FormatConversionError(BfError):
    def __init__(
        self,
        message: str = "Image format ordinal has no mapping",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(E_FORMAT_UNMAPPED, message, context)


class AdditionalRangeError(BfError):
    def __init__(
        self,
        message: str = "Value does not fit its additional field",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(E_RANGE, message, context)


class UnexpectedKindError(BfError):
    def __init__(
        self,
        message: str = "Container has a different kind",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(E_KIND_MISMATCH, message, context)


class DecompressionError(BfError):
    def __init__(
        self,
        message: str = "Payload decompression failed",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(E_DECOMPRESS, message, context)


class ContentError(BfError):
    """Content root resolution failures."""


class ContentNotFound(ContentError):
    def __init__(
        self,
        message: str = "Content not found",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(E_NOT_FOUND, message, context)


class ContentIOError(ContentError):
    def __init__(
        self,
        message: str = "Content could not be read",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(E_IO, message, context)


class ConversionError(BfError):
    """A conversion pipeline stage failed; ``stage`` names it."""

    def __init__(
        self,
        stage: str = "",
        message: str = "Conversion failed",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(E_CONVERT, message, {"stage": stage, **(context or {})})
        self.stage = stage

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.stage}: {self.message}"


class ManifestError(BfError):
    def __init__(
        self,
        message: str = "Invalid batch manifest",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(E_MANIFEST, message, context)


__all__ = [
    "BfError",
    "LoadError",
    "InvalidFileSignature",
    "InvalidKindValue",
    "VersionTooHigh",
    "NotEnoughDataOrUnaligned",
    "KindConversionError",
    "FormatConversionError",
    "AdditionalRangeError",
    "UnexpectedKindError",
    "DecompressionError",
    "ContentError",
    "ContentNotFound",
    "ContentIOError",
    "ConversionError",
    "ManifestError",
    "E_SIGNATURE",
    "E_KIND",
    "E_VERSION",
    "E_SHORT",
    "E_KIND_UNMAPPED",
    "E_FORMAT_UNMAPPED",
    "E_RANGE",
    "E_KIND_MISMATCH",
    "E_DECOMPRESS",
    "E_NOT_FOUND",
    "E_IO",
    "E_CONVERT",
    "E_MANIFEST",
]
