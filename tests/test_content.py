from pathlib import Path

import pytest

from bftools.content import Content
from bftools.errors import ContentNotFound


def _roots(tmp_path: Path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    (a / "tex").mkdir(parents=True)
    (b / "tex").mkdir(parents=True)
    (b / "tex" / "wall.png").write_bytes(b"B")
    (a / "notes.txt").write_text("from a", encoding="utf-8")
    (b / "notes.txt").write_text("from b", encoding="utf-8")
    return a, b


def test_content_first_root_wins(tmp_path: Path):
    a, b = _roots(tmp_path)
    content = Content([a, b])
    assert content.load_text("notes.txt") == "from a"
    assert content.find_file("tex/wall.png") == (b / "tex" / "wall.png").resolve()
    assert content.exists("tex/wall.png")
    assert not content.exists("tex/floor.png")


def test_content_load_binary(tmp_path: Path):
    a, b = _roots(tmp_path)
    content = Content([a])
    content.add_root(b)
    with content.load_binary("tex/wall.png") as f:
        assert f.read() == b"B"


def test_content_never_escapes_roots(tmp_path: Path):
    a, _ = _roots(tmp_path)
    (tmp_path / "secret.txt").write_text("x", encoding="utf-8")
    content = Content([a])
    assert content.find_file("../secret.txt") is None


def test_content_resolve_missing(tmp_path: Path):
    a, _ = _roots(tmp_path)
    with pytest.raises(ContentNotFound) as ei:
        Content([a]).resolve("missing.png")
    assert ei.value.context["path"] == "missing.png"
