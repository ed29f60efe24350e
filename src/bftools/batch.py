"""Batch conversion manifests (JSON/YAML).

A manifest lists independent image jobs::

    defaults:
      format: srgb_dxt5
      vflip: true
    jobs:
      - input: textures/wall.png
      - input: textures/ui.png
        output: ui.bf
        format: rgba8
        vflip: false

Relative ``input`` and ``output`` paths resolve against the manifest's
directory; a missing ``output`` becomes the input stem with ``.bf`` next
to the manifest. Jobs share nothing, so with ``workers > 1`` they run in
separate processes.
"""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
import json

import yaml

from .container.constants import ImageFormat
from .errors import BfError, ManifestError
from .image.pipeline import ImageConvertOptions, convert_image
from .reporting import SilentReporter, get_reporter, set_reporter, task
from .utils.paths import derive_output_from

__all__ = ["BatchJob", "JobOutcome", "load_manifest", "run_batch"]

_JOB_KEYS = {"input", "output", "format", "vflip"}


@dataclass(slots=True)
class BatchJob:
    input: Path
    output: Path
    format: ImageFormat = ImageFormat.DXT5
    vflip: bool = True


@dataclass(slots=True)
class JobOutcome:
    input: Path
    output: Path
    ok: bool
    stage: Optional[str] = None
    error: Optional[str] = None
    uncompressed: int = 0
    compressed: int = 0


def _parse_format(value: Any, where: str) -> ImageFormat:
    if isinstance(value, str):
        try:
            return ImageFormat.from_name(value)
        except BfError as e:
            raise ManifestError(f"{where}: {e.message}") from e
    raise ManifestError(f"{where}: format must be a string")


def _parse_job(
    entry: Any, index: int, defaults: Dict[str, Any], base_dir: Path
) -> BatchJob:
    where = f"jobs[{index}]"
    if isinstance(entry, str):
        entry = {"input": entry}
    if not isinstance(entry, dict):
        raise ManifestError(f"{where}: entry must be an object or a path")
    unknown = set(entry) - _JOB_KEYS
    if unknown:
        raise ManifestError(f"{where}: unknown keys {sorted(unknown)}")
    merged = {**defaults, **entry}
    raw_input = merged.get("input")
    if not isinstance(raw_input, str) or not raw_input:
        raise ManifestError(f"{where}: missing input path")
    input_path = base_dir / raw_input
    raw_output = merged.get("output")
    if raw_output is None:
        output_path = base_dir / derive_output_from(raw_input)
    elif isinstance(raw_output, str):
        output_path = base_dir / raw_output
    else:
        raise ManifestError(f"{where}: output must be a string")
    vflip = merged.get("vflip", True)
    if not isinstance(vflip, bool):
        raise ManifestError(f"{where}: vflip must be a boolean")
    fmt = _parse_format(merged.get("format", ImageFormat.DXT5.name), where)
    return BatchJob(input_path, output_path, fmt, vflip)


def load_manifest(path: str | Path) -> List[BatchJob]:
    p = Path(path)
    if not p.exists():
        raise ManifestError(f"Manifest not found: {p}", {"path": str(p)})
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(
            f"Cannot read manifest {p.name}: {e}", {"path": str(p)}
        ) from e
    try:
        if p.suffix.lower() in {".yaml", ".yml"}:
            data: Any = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ManifestError(f"Cannot parse manifest {p.name}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError("Root of manifest must be an object")
    defaults = data.get("defaults", {}) or {}
    if not isinstance(defaults, dict) or "input" in defaults:
        raise ManifestError("'defaults' must be an object without 'input'")
    unknown = set(defaults) - _JOB_KEYS
    if unknown:
        raise ManifestError(f"defaults: unknown keys {sorted(unknown)}")
    jobs = data.get("jobs")
    if not isinstance(jobs, list):
        raise ManifestError("'jobs' must be a list")
    base_dir = p.parent
    return [
        _parse_job(entry, i, defaults, base_dir) for i, entry in enumerate(jobs)
    ]


def _run_job(job: BatchJob) -> JobOutcome:
    options = ImageConvertOptions(
        input_path=job.input,
        output_path=job.output,
        format=job.format,
        vflip=job.vflip,
    )
    try:
        result = convert_image(options)
    except BfError as e:
        return JobOutcome(
            job.input,
            job.output,
            ok=False,
            stage=getattr(e, "stage", None),
            error=e.message,
        )
    except Exception as e:
        # Unstaged failures fail only this job.
        return JobOutcome(
            job.input, job.output, ok=False, error=f"{type(e).__name__}: {e}"
        )
    return JobOutcome(
        job.input,
        job.output,
        ok=True,
        uncompressed=result.uncompressed,
        compressed=result.compressed,
    )


def _silence_worker() -> None:
    set_reporter(SilentReporter())


def run_batch(jobs: List[BatchJob], workers: int = 1) -> List[JobOutcome]:
    """Convert every job; a failing job is recorded and the rest continue."""
    rep = get_reporter()
    outcomes: List[JobOutcome] = []
    with task("batch.run", "Convert images", total=len(jobs)) as meta:
        if workers <= 1:
            for job in jobs:
                outcomes.append(_run_job(job))
                rep.advance("batch.run", current_item=job.input.name)
        else:
            with ProcessPoolExecutor(
                max_workers=workers, initializer=_silence_worker
            ) as pool:
                for outcome in pool.map(_run_job, jobs):
                    outcomes.append(outcome)
                    rep.advance("batch.run", current_item=outcome.input.name)
        meta["jobs"] = len(outcomes)
        meta["failed"] = sum(1 for o in outcomes if not o.ok)
    for o in outcomes:
        if not o.ok:
            rep.error(f"{o.input.name}: {o.stage}: {o.error}")
    return outcomes
