"""Content root resolution.

A :class:`Content` holds an ordered list of root directories; relative
asset paths are looked up in each root in turn and the first existing
match wins. Paths that would escape a root are never resolved.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional

from .errors import ContentIOError, ContentNotFound
from .utils.paths import safe_file_path

__all__ = ["Content"]


class Content:
    def __init__(self, roots: Iterable[str | Path] = ()) -> None:
        self.roots: List[Path] = []
        for root in roots:
            self.add_root(root)

    def add_root(self, root: str | Path) -> None:
        self.roots.append(Path(root))

    def find_file(self, path: str | Path) -> Optional[Path]:
        for root in self.roots:
            try:
                candidate = safe_file_path(root, path)
            except ValueError:
                continue
            if candidate.exists():
                return candidate
        return None

    def exists(self, path: str | Path) -> bool:
        return self.find_file(path) is not None

    def resolve(self, path: str | Path) -> Path:
        found = self.find_file(path)
        if found is None:
            raise ContentNotFound(
                f"'{path}' not found in content roots",
                {"path": str(path), "roots": [str(r) for r in self.roots]},
            )
        return found

    def load_text(self, path: str | Path, encoding: str = "utf-8") -> str:
        p = self.resolve(path)
        try:
            return p.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ContentIOError(
                f"Cannot read '{path}': {e}", {"path": str(p)}
            ) from e

    def load_binary(self, path: str | Path) -> BinaryIO:
        """Open a resolved file for binary reading; the caller closes it."""
        p = self.resolve(path)
        try:
            return p.open("rb")
        except OSError as e:
            raise ContentIOError(
                f"Cannot open '{path}': {e}", {"path": str(p)}
            ) from e
