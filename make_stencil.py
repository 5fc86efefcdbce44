#!/usr/bin/env python3
"""
make_stencil.py
Turn photos into print-ready stencils on an A4 page (300 DPI).

Usage:
  python make_stencil.py INPUT [--outdir DIR] --mode [hollow|solid|realism] --preset [fineline|bold]
                         --threshold T --thickness K --detail D --mirror
                         --multi --variants [3|6|9] --min-size IN --max-size IN --no-dimensions
                         --settings FILE.json --format [png|pdf] --manifest --jobs N --debug

Modes:
  hollow  : Outline stencil from a difference of Gaussians.
  solid   : Filled stencil from an adaptive local threshold.
  realism : Full-colour tone-mapped print (vibrance, brilliance, sharpen).

Input:
  Any Pillow-readable image, or a folder of them. EXIF orientation is honoured.

Output:
  PNG by default (lossless). Writes <stem>_stencil.png next to INPUT unless --outdir is given.

Notes:
  Settings start from the built-in defaults, then --preset, then --settings, then flags.
  Folder mode processes --jobs files in parallel and prints each file's log in order.
"""

from __future__ import annotations

import argparse
import io
import json
import sys
import threading
import time
from contextlib import contextmanager
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, TextIO, Tuple

from stencil_map.compose import PageConfig, compose_page, layout_manifest
from stencil_map.constants import (
    DETAIL_RANGE,
    IMAGE_EXTS,
    MORPH_MAX_PASSES,
    OUTPUT_SUFFIX,
    PRESETS,
)
from stencil_map.core_types import MODES, StencilConfigError, StencilInputError, StencilSettings
from stencil_map.image_io import load_image_rgba, save_page
from stencil_map.pipeline import process_raster
from stencil_map.settings import build_settings, load_settings_file
from stencil_map.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    warn,
)

# CLI args & small helpers


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments for stencil generation.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        outdir: optional Path for outputs
        settings fields (None when not given on the command line)
        preset / settings_file: layered under the flags
        format: "png" | "pdf"
        manifest: bool, write <output>.json layout manifest
        jobs: parallel file workers
        debug: bool for stage timings and stats
    """
    parser = argparse.ArgumentParser(
        prog="make_stencil",
        description="Convert photo(s) into stencil pages ready to print.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument("--mode", choices=list(MODES), default=None, help="Processing mode.")
    parser.add_argument(
        "--preset", choices=sorted(PRESETS), default=None, help="Named starting point."
    )
    parser.add_argument(
        "--settings",
        dest="settings_file",
        type=Path,
        default=None,
        help="JSON file of settings fields.",
    )
    parser.add_argument("--threshold", type=int, default=None, help="0..255")
    parser.add_argument(
        "--thickness",
        type=int,
        default=None,
        help=f"<0 thins lines, >0 thickens; at most {MORPH_MAX_PASSES} passes.",
    )
    parser.add_argument(
        "--detail",
        dest="detail_level",
        type=int,
        default=None,
        help=f"{DETAIL_RANGE[0]}..{DETAIL_RANGE[1]}: <0 sharpens, >0 smooths.",
    )
    parser.add_argument(
        "--mirror", dest="mirrored", action="store_true", default=None,
        help="Flip horizontally (for transfer paper).",
    )
    parser.add_argument(
        "--multi", dest="multi_size", action="store_true", default=None,
        help="Lay out several graded sizes on the page.",
    )
    parser.add_argument(
        "--variants", dest="variant_count", type=int, choices=[3, 6, 9], default=None,
        help="Number of sizes in --multi mode.",
    )
    parser.add_argument("--min-size", dest="min_size", type=float, default=None, help="Inches")
    parser.add_argument("--max-size", dest="max_size", type=float, default=None, help="Inches")
    parser.add_argument(
        "--no-dimensions", dest="show_dimensions", action="store_false", default=None,
        help="Hide size labels in --multi mode.",
    )
    parser.add_argument("--saturation", type=float, default=None, help="Realism: 0..500, 100 neutral")
    parser.add_argument("--contrast", type=float, default=None, help="Realism: 0..500, 100 neutral")
    parser.add_argument("--brightness", type=float, default=None, help="Realism: 0..500, 100 neutral")
    parser.add_argument("--sharpness", type=float, default=None, help="Realism: 0..10")
    parser.add_argument("--brilliance", type=float, default=None, help="Realism: -100..100")
    parser.add_argument(
        "--format", choices=["png", "pdf"], default="png", help="Output file format."
    )
    parser.add_argument(
        "--manifest", action="store_true", help="Write a JSON layout manifest per output."
    )
    parser.add_argument("--jobs", type=int, default=2, help="Files processed in parallel")
    parser.add_argument("--debug", action="store_true", help="Verbose stage details")
    return parser.parse_args(argv)


_SETTING_FLAGS = (
    "mode",
    "threshold",
    "thickness",
    "detail_level",
    "mirrored",
    "multi_size",
    "variant_count",
    "min_size",
    "max_size",
    "show_dimensions",
    "saturation",
    "contrast",
    "brightness",
    "sharpness",
    "brilliance",
)


def settings_from_args(args: argparse.Namespace) -> StencilSettings:
    """Defaults < preset < settings file < explicit flags."""
    overrides: Dict[str, Any] = {}
    if args.settings_file is not None:
        overrides.update(load_settings_file(args.settings_file))
    for name in _SETTING_FLAGS:
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    return build_settings(preset=args.preset, overrides=overrides)


def output_path_for(src_path: Path, outdir: Optional[Path], fmt: str) -> Path:
    name = f"{src_path.stem}{OUTPUT_SUFFIX}.{fmt}"
    return (outdir / name) if outdir else src_path.with_name(name)


# Per-file processing


def _process_single_image(
    src_path: Path,
    out_path: Path,
    settings: StencilSettings,
    fmt: str,
    write_manifest: bool,
    debug: bool,
) -> bool:
    """
    Process a single image path end-to-end:
      load -> process -> compose -> save -> report.
    Returns False when the file could not be processed.
    """
    t_start = time.perf_counter()
    print_banner(src_path.name)
    page_cfg = PageConfig()

    try:
        rgba = load_image_rgba(src_path)
        raster = process_raster(rgba, settings, debug=debug)
        t_after_process = time.perf_counter()
        page = compose_page(raster, settings, page_cfg)
        t_after_compose = time.perf_counter()
        written = save_page(out_path, page, fmt)
        t_after_save = time.perf_counter()

        H, W = raster.shape[:2]
        if write_manifest:
            manifest = layout_manifest(W, H, settings, page_cfg)
            manifest["source_file"] = str(src_path)
            manifest["image_file"] = str(written)
            with open(written.with_suffix(".json"), "w", encoding="utf-8") as mf:
                json.dump(manifest, mf, indent=2)
    except (StencilInputError, StencilConfigError) as e:
        error(f"{src_path.name}: {e}")
        return False
    except OSError as e:
        error(f"{src_path.name}: cannot write output: {e}")
        return False

    log(f"Mode: {settings.mode}")
    log(
        f"Wrote {written.name} | working={W}x{H} | page={page.size[0]}x{page.size[1]}"
        f" | layout={'multi' if settings.multi_size else 'single'}"
    )
    if debug:
        debug_log(
            f"Total {format_total_duration_compact(t_after_save - t_start)}  "
            f"(process={format_total_duration_compact(t_after_process - t_start)}, "
            f"compose={format_total_duration_compact(t_after_compose - t_after_process)}, "
            f"save={format_total_duration_compact(t_after_save - t_after_compose)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_after_save - t_start)}")
    return True


class _PerThreadStdout:
    """
    sys.stdout stand-in for --jobs runs. Worker threads inside capture()
    write to their own buffer; every other thread writes to the real stream.
    """

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self._local = threading.local()

    def _target(self) -> TextIO:
        buf = getattr(self._local, "buf", None)
        return self.stream if buf is None else buf

    def write(self, text: str) -> int:
        return self._target().write(text)

    def flush(self) -> None:
        self._target().flush()

    @contextmanager
    def capture(self) -> Iterator[io.StringIO]:
        buf = io.StringIO()
        self._local.buf = buf
        try:
            yield buf
        finally:
            self._local.buf = None


def _process_one_captured(
    router: _PerThreadStdout,
    path: Path,
    settings: StencilSettings,
    outdir: Optional[Path],
    fmt: str,
    write_manifest: bool,
    debug: bool,
) -> Tuple[str, bool]:
    """
    Process a single file with stdout capture.

    Useful for concurrent execution where output should be printed in order.
    """
    with router.capture() as buf:
        ok = _process_single_image(
            path, output_path_for(path, outdir, fmt), settings, fmt, write_manifest, debug
        )
    return buf.getvalue(), ok


def list_input_images(folder: Path) -> List[Path]:
    """Image files in a folder, sorted by name, skipping earlier outputs."""
    files = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTS
        and not p.stem.endswith(OUTPUT_SUFFIX)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Entry point


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving readable output ordering. Returns the exit status.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    src = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2

    try:
        settings = settings_from_args(args)
    except StencilConfigError as e:
        error(str(e))
        return 2

    print_config_line(
        settings.mode,
        [
            ("Threshold", settings.threshold),
            ("Detail", settings.detail_level),
            ("Thickness", settings.thickness),
            ("Mirrored", settings.mirrored),
            ("Multi", settings.multi_size),
            ("Jobs", args.jobs),
        ],
        debug=False,
    )
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Preset", args.preset or "-"),
                    ("Variants", settings.variant_count),
                    ("Sizes", f"{settings.min_size}-{settings.max_size}in"),
                    ("Format", args.format),
                ]
            )
        )

    if src.is_dir():
        files = list_input_images(src)
        if not files:
            warn(f"no images in {src}")
            return 0
        if args.debug:
            debug_log(key_value_pairs_to_string([("Images", len(files)), ("Jobs", args.jobs)]))
        if args.jobs <= 1:
            results = [
                _process_single_image(
                    p,
                    output_path_for(p, args.outdir, args.format),
                    settings,
                    args.format,
                    args.manifest,
                    args.debug,
                )
                for p in files
            ]
        else:
            router = _PerThreadStdout(sys.stdout)
            sys.stdout = router  # type: ignore[assignment]
            try:
                with ThreadPoolExecutor(max_workers=args.jobs) as ex:
                    futures = [
                        ex.submit(
                            _process_one_captured,
                            router,
                            p,
                            settings,
                            args.outdir,
                            args.format,
                            args.manifest,
                            args.debug,
                        )
                        for p in files
                    ]
                    blocks = [f.result() for f in futures]
            finally:
                sys.stdout = router.stream
            print("".join(text for text, _ in blocks), end="", flush=True)
            results = [ok for _, ok in blocks]
    else:
        results = [
            _process_single_image(
                src,
                output_path_for(src, args.outdir, args.format),
                settings,
                args.format,
                args.manifest,
                args.debug,
            )
        ]

    failed = results.count(False)
    if failed:
        error(f"{failed} of {len(results)} file(s) failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
