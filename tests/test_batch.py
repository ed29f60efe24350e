import json
from pathlib import Path

import pytest
import yaml
from PIL import Image

from bftools.batch import load_manifest, run_batch
from bftools.container import load_file
from bftools.container.constants import ImageFormat
from bftools.errors import ManifestError


def _png(path: Path, size=(8, 8)) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, (40, 80, 120)).save(path)


def test_batch_json_manifest(tmp_path: Path):
    _png(tmp_path / "a.png")
    _png(tmp_path / "img" / "b.png", (16, 16))
    manifest = tmp_path / "assets.json"
    manifest.write_text(
        json.dumps(
            {
                "defaults": {"format": "rgba8"},
                "jobs": [
                    "a.png",
                    {"input": "img/b.png", "output": "out/b.bf", "format": "dxt1"},
                    "missing.png",
                ],
            }
        ),
        encoding="utf-8",
    )
    jobs = load_manifest(manifest)
    assert [j.format for j in jobs] == [
        ImageFormat.RGBA8,
        ImageFormat.DXT1,
        ImageFormat.RGBA8,
    ]
    assert jobs[0].output == tmp_path / "a.bf"

    outcomes = run_batch(jobs)
    assert [o.ok for o in outcomes] == [True, True, False]
    assert outcomes[2].stage == "load"
    assert load_file(tmp_path / "a.bf").image_info().format is ImageFormat.RGBA8
    assert load_file(tmp_path / "out" / "b.bf").image_info().width == 16
    assert outcomes[0].uncompressed == 8 * 8 * 4 + 4 * 4 * 4


def test_batch_yaml_manifest_with_workers(tmp_path: Path):
    for name in ("x", "y", "z"):
        _png(tmp_path / f"{name}.png")
    manifest = tmp_path / "assets.yaml"
    manifest.write_text(
        yaml.safe_dump(
            {
                "defaults": {"format": "srgb_dxt5", "vflip": False},
                "jobs": ["x.png", "y.png", {"input": "z.png", "vflip": True}],
            }
        ),
        encoding="utf-8",
    )
    jobs = load_manifest(manifest)
    assert [j.vflip for j in jobs] == [False, False, True]
    outcomes = run_batch(jobs, workers=2)
    assert all(o.ok for o in outcomes)
    for name in ("x", "y", "z"):
        assert (tmp_path / f"{name}.bf").exists()


@pytest.mark.parametrize(
    "doc",
    [
        [],
        {"jobs": "a.png"},
        {"jobs": [{"input": "a.png", "colour": "red"}]},
        {"jobs": [{"input": "a.png", "format": "bc7"}]},
        {"jobs": [{"input": "a.png", "vflip": "yes"}]},
        {"jobs": [{"output": "a.bf"}]},
        {"defaults": {"input": "a.png"}, "jobs": []},
        {"defaults": {"colour": "red"}, "jobs": ["a.png"]},
    ],
)
def test_batch_manifest_errors(tmp_path: Path, doc):
    manifest = tmp_path / "bad.json"
    manifest.write_text(json.dumps(doc), encoding="utf-8")
    with pytest.raises(ManifestError):
        load_manifest(manifest)


def test_batch_manifest_missing_or_unparsable(tmp_path: Path):
    with pytest.raises(ManifestError):
        load_manifest(tmp_path / "none.json")
    bad = tmp_path / "bad.yaml"
    bad.write_text("jobs: [unclosed", encoding="utf-8")
    with pytest.raises(ManifestError):
        load_manifest(bad)


def test_batch_manifest_not_utf8(tmp_path: Path):
    manifest = tmp_path / "m.json"
    manifest.write_bytes(b'{"jobs": ["\xff\xfe.png"]}')
    with pytest.raises(ManifestError):
        load_manifest(manifest)


def test_batch_manifest_is_a_directory(tmp_path: Path):
    folder = tmp_path / "m.json"
    folder.mkdir()
    with pytest.raises(ManifestError):
        load_manifest(folder)


def test_batch_unexpected_error_fails_only_that_job(tmp_path: Path, monkeypatch):
    import bftools.batch as batch

    _png(tmp_path / "ok.png")
    _png(tmp_path / "boom.png")
    real = batch.convert_image

    def convert(options):
        if options.input_path.name == "boom.png":
            raise TypeError("unexpected")
        return real(options)

    monkeypatch.setattr(batch, "convert_image", convert)
    manifest = tmp_path / "m.json"
    manifest.write_text(json.dumps({"jobs": ["boom.png", "ok.png"]}), encoding="utf-8")
    outcomes = run_batch(load_manifest(manifest))
    assert [o.ok for o in outcomes] == [False, True]
    assert outcomes[0].stage is None
    assert outcomes[0].error == "TypeError: unexpected"
    assert (tmp_path / "ok.bf").exists()
