"""High-level API for bftools.

These wrappers add reporting (section headers and summary lines) around
the lower-level container and image modules. The CLI runs container and
image operations only through them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Tuple

from .batch import JobOutcome, load_manifest, run_batch
from .container.inspector import (
    inspect_container as _inspect_container_impl,
    validate_container as _validate_container_impl,
)
from .container.loader import Container, load, load_file
from .image.pipeline import (
    STAGES,
    ConversionResult,
    ImageConvertOptions,
    convert_image,
)
from .logging import section, step
from .reporting import get_reporter

__all__ = [
    "ImageConvertOptions",
    "ConversionResult",
    "Container",
    "JobOutcome",
    "build_image",
    "inspect_container",
    "inspect_and_validate",
    "validate_container",
    "batch_convert",
    "load",
    "load_file",
]


def build_image(options: ImageConvertOptions) -> ConversionResult:
    rep = get_reporter()
    with section(f"img2bf {options.input_path.name}"):
        result = convert_image(options)
    timing = " ".join(
        f"{stage}={result.timings[stage] * 1000:.1f}ms"
        for stage in STAGES
        if stage in result.timings
    )
    rep.status(f"Timing summary: {timing}")
    rep.status(
        "Convert summary: file="
        + f"{result.output_file.name} size={result.width}x{result.height} "
        + f"format={result.format.name} levels={result.levels} "
        + f"uncompressed={result.uncompressed} compressed={result.compressed} "
        + f"ratio={result.ratio:.1f}%"
    )
    step(f"Wrote {result.output_file} ({result.bytes_written} bytes)")
    return result


def inspect_container(path: str | Path) -> Dict[str, Any]:
    return _inspect_container_impl(path)


def inspect_and_validate(
    path: str | Path,
) -> Tuple[Dict[str, Any], List[str]]:
    """Inspect once and return the report together with its issues."""
    info = _inspect_container_impl(path)
    return info, _validate_container_impl(info)


def validate_container(path: str | Path) -> List[str]:
    return inspect_and_validate(path)[1]


def batch_convert(
    manifest_path: str | Path, workers: int = 1
) -> List[JobOutcome]:
    rep = get_reporter()
    jobs = load_manifest(manifest_path)
    with section(f"batch {Path(manifest_path).name}"):
        outcomes = run_batch(jobs, workers=workers)
    ok = [o for o in outcomes if o.ok]
    raw = sum(o.uncompressed for o in ok)
    compressed = sum(o.compressed for o in ok)
    rep.status(
        "Batch summary: "
        + f"jobs={len(outcomes)} ok={len(ok)} failed={len(outcomes) - len(ok)} "
        + f"uncompressed={raw} compressed={compressed}"
    )
    return outcomes
