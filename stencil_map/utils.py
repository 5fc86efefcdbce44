from __future__ import annotations

"""
Shared utilities for stencil_map.

Includes time formatting, the sliding-window box blur, luma extraction, the
RGB convolution pass, Pillow resample lookup, and tidy logging.
"""

import math
import sys
from typing import Any, Iterable, List, Sequence, Tuple

import numpy as np
from PIL import Image

from .core_types import LumaPlane, U8Image, assert_plane_2d, to_u8


#  Time formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'Ss.s', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


# Lightweight image-space ops


def _running_mean_rows(src: np.ndarray, radius: int) -> np.ndarray:
    """Mean over a (2r+1) window along axis 1 with clamp-to-edge extension."""
    window = 2 * radius + 1
    padded = np.pad(src, ((0, 0), (radius, radius)), mode="edge")
    csum = np.cumsum(padded, axis=1, dtype=np.float64)
    csum = np.concatenate([np.zeros((src.shape[0], 1), dtype=np.float64), csum], axis=1)
    return (csum[:, window:] - csum[:, :-window]) / window


def box_blur(plane: np.ndarray, radius: int) -> LumaPlane:
    """
    Separable box blur, horizontal then vertical, in O(W*H) for any radius.

    Each pass keeps a running sum over a window of 2*radius+1 pixels; taps
    past the border repeat the nearest edge pixel. radius < 1 returns a copy.
    Returns float32.
    """
    src = assert_plane_2d(np.asarray(plane))
    if radius < 1:
        return src.astype(np.float32, copy=True)
    radius = int(radius)
    horiz = _running_mean_rows(src.astype(np.float64), radius)
    out = _running_mean_rows(horiz.T, radius).T
    # a mean never leaves the input range; this also keeps flat regions exact
    out = np.clip(out, float(src.min()), float(src.max()))
    return out.astype(np.float32)


def luma_plane(rgba: U8Image) -> LumaPlane:
    """Rec.601 luma of an RGBA image. Returns float32 [H,W]."""
    rgb = rgba[..., :3].astype(np.float64)
    y = rgb[..., 0] * 0.299 + rgb[..., 1] * 0.587 + rgb[..., 2] * 0.114
    return y.astype(np.float32)


def convolve_rgb(rgba: U8Image, kernel: Sequence[float]) -> U8Image:
    """
    Convolve R, G and B with a square odd-sized kernel (row-major weights).

    Taps that fall outside the image contribute nothing. Each channel is
    clamped to [0,255]; alpha is copied through. Returns a new array.
    """
    weights = np.asarray(kernel, dtype=np.float64).ravel()
    side = int(round(math.sqrt(weights.size)))
    if side * side != weights.size or side % 2 == 0:
        raise ValueError(f"kernel must be square with odd side, got {weights.size} taps")
    weights = weights.reshape(side, side)
    half = side // 2

    H, W = rgba.shape[:2]
    src = rgba[..., :3].astype(np.float64)
    padded = np.pad(src, ((half, half), (half, half), (0, 0)), mode="constant")
    acc = np.zeros((H, W, 3), dtype=np.float64)
    for cy in range(side):
        for cx in range(side):
            w = float(weights[cy, cx])
            if w != 0.0:
                acc += w * padded[cy : cy + H, cx : cx + W]

    out = rgba.copy()
    out[..., :3] = to_u8(acc)
    return out


def pillow_resample_from_name(name: str) -> int:
    """Map a string to a Pillow resampling filter enum."""
    if name == "nearest":
        return Image.Resampling.NEAREST
    if name == "bilinear":
        return Image.Resampling.BILINEAR
    if name == "bicubic":
        return Image.Resampling.BICUBIC
    if name == "lanczos":
        return Image.Resampling.LANCZOS
    return Image.Resampling.BICUBIC  # default


def ink_coverage(binary_map: np.ndarray) -> float:
    """Share of ink (value < 128) pixels in a binary map, 0..1."""
    if binary_map.size == 0:
        return 0.0
    return float(np.count_nonzero(binary_map < 128.0)) / float(binary_map.size)


#  CLI / progress logging


def enable_line_buffered_stdout() -> None:
    """
    Enable line-buffered stdout when supported.
    Helps live progress printing in terminals that expose .reconfigure().
    """
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1_234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def format_percentage(x: float, decimals: int = 1) -> str:
    """Format a 0..1 share as a percentage."""
    return f"{x * 100.0:.{decimals}f}%"


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [solid] Threshold: 223  Detail: 0  Thickness: 1  Mirrored: off
    Routes to debug() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    "format_seconds_compact",
    "format_total_duration_compact",
    "box_blur",
    "luma_plane",
    "convolve_rgb",
    "pillow_resample_from_name",
    "ink_coverage",
    "enable_line_buffered_stdout",
    "format_bool_on_off",
    "format_number_compact",
    "format_percentage",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
