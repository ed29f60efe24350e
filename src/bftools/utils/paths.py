"""Path utilities (safe resolution, output naming)."""

from __future__ import annotations
from pathlib import Path

__all__ = ["safe_file_path", "derive_output_from", "CONTAINER_SUFFIX"]

CONTAINER_SUFFIX = ".bf"


def safe_file_path(base_dir: Path, file_path: str | Path) -> Path:
    base_dir = Path(base_dir).resolve()
    resolved = (base_dir / file_path).resolve()
    resolved.relative_to(base_dir)  # raises ValueError if escapes
    return resolved


def derive_output_from(input_path: str | Path) -> Path:
    """Input file stem with the container suffix, relative to the working directory."""
    stem = Path(input_path).stem
    if not stem:
        raise ValueError(f"Input path has no file name: {input_path!s}")
    return Path(stem + CONTAINER_SUFFIX)
