"""Command line interface for bftools."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import (
    ImageConvertOptions,
    batch_convert,
    build_image,
    inspect_and_validate,
)
from .container.constants import ImageFormat
from .content import Content
from .errors import BfError, ConversionError
from .logging import configure_logging
from .reporting import (
    set_reporter,
    get_reporter,
    PlainReporter,
    JsonLinesReporter,
    SilentReporter,
    RichReporter,
    set_verbosity,
)
from .utils.paths import derive_output_from

_FORMAT_CHOICES = [f.name.lower() for f in ImageFormat]


def _resolve_io(args: argparse.Namespace) -> tuple[Path, Path]:
    input_path = Path(args.input)
    output_path = (
        Path(args.output) if args.output else derive_output_from(input_path)
    )
    if args.content:
        content = Content([args.content])
        found = content.find_file(args.input)
        if found is not None:
            input_path = found
        if not output_path.is_absolute():
            output_path = Path(args.content) / output_path
    return input_path, output_path


def _img2bf_cmd(args: argparse.Namespace) -> int:
    input_path, output_path = _resolve_io(args)
    opts = ImageConvertOptions(
        input_path=input_path,
        output_path=output_path,
        format=ImageFormat.from_name(args.format),
        vflip=not args.not_vflip,
    )
    build_image(opts)
    return 0


def _info_cmd(args: argparse.Namespace) -> int:
    info, issues = inspect_and_validate(args.file)
    if args.json:
        print(json.dumps({**info, "issues": issues}, indent=2, sort_keys=True))
    else:
        header = info["header"]
        print(f"file={args.file}")
        print(f"magic={header['magic']}")
        print(f"version={header['version']}")
        print(f"kind={header['kind_name']}")
        image = info.get("image")
        if image is not None:
            print(
                f"additional=width:{image['width']} height:{image['height']} "
                f"format:{image['format']}"
            )
        else:
            print(f"additional={header['additional']}")
        print(f"uncompressed={header['uncompressed']}")
        print(f"compressed={header['compressed']}")
    rep = get_reporter()
    for issue in issues:
        rep.warning(issue)
    rep.status(
        "Container summary: "
        + f"kind={info['header']['kind_name']} payload={info['payload_size']} "
        + f"issues={len(issues)}"
    )
    return 1 if issues else 0


def _batch_cmd(args: argparse.Namespace) -> int:
    outcomes = batch_convert(args.manifest, workers=args.jobs)
    return 0 if all(o.ok for o in outcomes) else 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="bftools", description="BF asset container tools"
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser(
        "img2bf", help="Convert a basic image format to a BF image container"
    )
    c.add_argument(
        "--input",
        "-in",
        dest="input",
        required=True,
        metavar="INPUT_FILE",
        help="Path to file to convert / import",
    )
    c.add_argument(
        "--output",
        "-out",
        dest="output",
        metavar="OUTPUT_FILE",
        help="Path to output file (default: input stem with .bf)",
    )
    c.add_argument(
        "--content",
        metavar="CONTENT_PATH",
        help="Content root directory to import the file into",
    )
    c.add_argument(
        "--format",
        choices=_FORMAT_CHOICES,
        default=ImageFormat.DXT5.name.lower(),
        help="Target image format (default: dxt5)",
    )
    c.add_argument(
        "--not-vflip",
        dest="not_vflip",
        action="store_true",
        help="Do not flip the image vertically",
    )
    c.set_defaults(func=_img2bf_cmd)

    i = sub.add_parser("info", help="Inspect a BF container")
    i.add_argument("file", type=Path)
    i.add_argument("--json", action="store_true", help="Emit JSON")
    i.set_defaults(func=_info_cmd)

    b = sub.add_parser("batch", help="Convert images listed in a manifest")
    b.add_argument("manifest", type=Path)
    b.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=1,
        help="Number of worker processes (default: 1)",
    )
    b.set_defaults(func=_batch_cmd)

    return p


def _select_reporter(requested: str) -> None:
    if requested == "json":
        set_reporter(JsonLinesReporter())
    elif requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        # Plain, or rich without a TTY.
        set_reporter(PlainReporter())


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    _select_reporter(args.reporter)
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    rep = get_reporter()
    try:
        return args.func(args)
    except ConversionError as e:
        rep.error(
            f"{args.cmd} failed at stage '{e.stage}': {e.message}",
            code=e.code,
        )
        return 1
    except BfError as e:
        rep.error(f"{args.cmd} failed: {e.code}: {e.message}", code=e.code)
        return 1
    except OSError as e:
        rep.error(f"{args.cmd} failed: {e}")
        return 1
    finally:
        rep.flush()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
