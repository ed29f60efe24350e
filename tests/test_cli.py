import json
from pathlib import Path

from PIL import Image

from bftools.cli import main
from bftools.container import load_file
from bftools.container.constants import ImageFormat


def _png(path: Path) -> Path:
    Image.new("RGBA", (16, 8), (255, 255, 255, 128)).save(path)
    return path


def test_cli_img2bf_default_output(tmp_path: Path, monkeypatch):
    src = _png(tmp_path / "icon.png")
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    assert main(["-r", "silent", "img2bf", "--input", str(src)]) == 0
    c = load_file(work / "icon.bf")
    assert c.image_info().format is ImageFormat.DXT5


def test_cli_img2bf_explicit_output_and_format(tmp_path: Path):
    src = _png(tmp_path / "icon.png")
    out = tmp_path / "nested" / "icon.bf"
    rc = main(
        [
            "-r",
            "silent",
            "img2bf",
            "-in",
            str(src),
            "-out",
            str(out),
            "--format",
            "srgb8_a8",
            "--not-vflip",
        ]
    )
    assert rc == 0
    payload = load_file(out).decompress()
    assert payload[:4] == bytes([255, 255, 255, 128])


def test_cli_img2bf_content_root(tmp_path: Path, monkeypatch):
    content = tmp_path / "content"
    content.mkdir()
    _png(content / "ui.png")
    monkeypatch.chdir(tmp_path)
    rc = main(
        ["-r", "silent", "img2bf", "--input", "ui.png", "--content", str(content)]
    )
    assert rc == 0
    assert (content / "ui.bf").exists()


def test_cli_img2bf_failure_exit_code(tmp_path: Path, capsys):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"nope")
    rc = main(
        ["img2bf", "--input", str(bad), "--output", str(tmp_path / "bad.bf")]
    )
    assert rc == 1
    err = capsys.readouterr().err
    assert "stage 'load'" in err
    assert not (tmp_path / "bad.bf").exists()


def test_cli_info(tmp_path: Path, capsys):
    src = _png(tmp_path / "icon.png")
    out = tmp_path / "icon.bf"
    assert main(["-r", "silent", "img2bf", "--input", str(src), "--output", str(out)]) == 0
    capsys.readouterr()

    assert main(["-r", "silent", "info", str(out)]) == 0
    text = capsys.readouterr().out
    assert "magic=7667" in text
    assert "version=1" in text
    assert "kind=IMAGE" in text
    assert "additional=width:16 height:8 format:DXT5" in text

    assert main(["-r", "silent", "info", str(out), "--json"]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info["header"]["compressed"] == info["payload_size"]
    assert info["issues"] == []


def test_cli_info_rejects_bad_file(tmp_path: Path, capsys):
    bad = tmp_path / "bad.bf"
    bad.write_bytes(bytes([0, 0, 0]))
    assert main(["info", str(bad)]) == 1
    assert "E_SIGNATURE" in capsys.readouterr().err
    assert main(["-r", "silent", "info", str(tmp_path / "missing.bf")]) == 1


def test_cli_batch(tmp_path: Path):
    _png(tmp_path / "a.png")
    manifest = tmp_path / "m.json"
    manifest.write_text(
        json.dumps({"jobs": ["a.png", "gone.png"]}), encoding="utf-8"
    )
    assert main(["-r", "silent", "batch", str(manifest)]) == 1
    assert (tmp_path / "a.bf").exists()


def test_cli_batch_unreadable_manifest(tmp_path: Path):
    from bftools.reporting import get_reporter

    manifest = tmp_path / "m.json"
    manifest.write_bytes(b'{"jobs": ["\xff\xfe.png"]}')
    assert main(["-r", "silent", "batch", str(manifest)]) == 1
    errors = get_reporter().errors
    assert len(errors) == 1
    assert "E_MANIFEST" in errors[0]


def test_cli_info_reports_issues(tmp_path: Path):
    from bftools.reporting import get_reporter

    src = _png(tmp_path / "icon.png")
    out = tmp_path / "icon.bf"
    assert main(["-r", "silent", "img2bf", "--input", str(src), "--output", str(out)]) == 0
    out.write_bytes(out.read_bytes() + b"\x00" * 3)
    assert main(["-r", "silent", "info", str(out)]) == 1
    warnings = get_reporter().warnings
    assert any(w.startswith("Payload size mismatch") for w in warnings)
