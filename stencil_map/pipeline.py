# stencil_map/pipeline.py
from __future__ import annotations

"""
End-to-end stencil generation.

    rgba + settings
      -> prepare (validate, cap longest edge, mirror)
      -> resolve_variant -> run_stencil | run_realism
      -> compose_page -> PNG

Each call is a pure function of (pixels, settings). Nothing is cached between
calls and buffers are never shared, so independent images can run in
parallel (process_many).
"""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

from PIL import Image

from .compose import PageConfig, compose_page
from .core_types import StencilSettings, U8Image, assert_rgba_image
from .image_io import cap_longest_edge, decode_image_bytes, encode_png, mirror_horizontal
from .mode import RealismConfig, resolve_variant
from .realism import run_realism
from .settings import validate_settings
from .stencil import run_stencil
from .utils import debug_log, format_seconds_compact, key_value_pairs_to_string


@dataclass(frozen=True)
class BatchResult:
    """Outcome for one image of a batch, in submission order."""

    index: int
    png: Optional[bytes] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def prepare(rgba: U8Image, settings: StencilSettings, *, debug: bool = False) -> U8Image:
    """Shared prefix for every mode: validate, downsample past the cap, mirror."""
    src = assert_rgba_image(rgba)
    H0, W0 = src.shape[:2]
    out = cap_longest_edge(src)
    if settings.mirrored:
        out = mirror_horizontal(out)
    elif out is src:
        out = src.copy()
    if debug:
        H, W = out.shape[:2]
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{W0}x{H0}"),
                    ("Working", f"{W}x{H}"),
                    ("Mirrored", bool(settings.mirrored)),
                ]
            )
        )
    return out


def process_raster(
    rgba: U8Image, settings: StencilSettings, *, debug: bool = False
) -> U8Image:
    """Processed raster before page layout (working size, RGBA)."""
    validate_settings(settings)
    work = prepare(rgba, settings, debug=debug)
    variant = resolve_variant(settings)
    if isinstance(variant, RealismConfig):
        return run_realism(work, variant, debug=debug)
    out, _ = run_stencil(work, variant, debug=debug)
    return out


def generate_stencil(
    rgba: U8Image,
    settings: StencilSettings,
    page: PageConfig = PageConfig(),
    *,
    debug: bool = False,
) -> Image.Image:
    """Process and lay out one image. Returns the page as an RGB image."""
    t0 = time.perf_counter()
    raster = process_raster(rgba, settings, debug=debug)
    t1 = time.perf_counter()
    result = compose_page(raster, settings, page)
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Process", format_seconds_compact(t1 - t0)),
                    ("Compose", format_seconds_compact(time.perf_counter() - t1)),
                    ("Page", f"{result.size[0]}x{result.size[1]}"),
                ]
            )
        )
    return result


def generate_stencil_png(
    rgba: U8Image,
    settings: StencilSettings,
    page: PageConfig = PageConfig(),
    *,
    debug: bool = False,
) -> bytes:
    """generate_stencil, PNG-encoded."""
    return encode_png(generate_stencil(rgba, settings, page, debug=debug))


def process_image_bytes(
    data: bytes,
    settings: StencilSettings,
    page: PageConfig = PageConfig(),
    *,
    debug: bool = False,
) -> bytes:
    """Decode an encoded image, generate its stencil page, return PNG bytes."""
    return generate_stencil_png(decode_image_bytes(data), settings, page, debug=debug)


def _run_one(
    index: int, data: bytes, settings: StencilSettings, page: PageConfig
) -> BatchResult:
    try:
        return BatchResult(index=index, png=process_image_bytes(data, settings, page))
    except ValueError as e:
        return BatchResult(index=index, error=e)


def process_many(
    buffers: Sequence[bytes],
    settings: StencilSettings,
    page: PageConfig = PageConfig(),
    *,
    jobs: int = 2,
) -> List[BatchResult]:
    """
    Run independent images on a thread pool, one task per image.

    Input and configuration errors are reported per image; other exceptions
    (e.g. MemoryError) propagate.
    """
    if jobs <= 1 or len(buffers) <= 1:
        return [_run_one(i, b, settings, page) for i, b in enumerate(buffers)]
    with ThreadPoolExecutor(max_workers=jobs) as ex:
        futures = [
            ex.submit(_run_one, i, b, settings, page) for i, b in enumerate(buffers)
        ]
        return [f.result() for f in futures]


__all__ = [
    "BatchResult",
    "prepare",
    "process_raster",
    "generate_stencil",
    "generate_stencil_png",
    "process_image_bytes",
    "process_many",
]
