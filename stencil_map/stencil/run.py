# stencil_map/stencil/run.py
from __future__ import annotations

"""
Stencil path: RGBA -> luma -> detail filter -> binarize -> thickness -> RGBA.
"""

import time
from typing import Tuple, Union

import numpy as np

from ..core_types import BinaryMap, U8Image
from ..mode import HollowConfig, SolidConfig
from ..utils import (
    debug_log,
    format_percentage,
    format_seconds_compact,
    ink_coverage,
    key_value_pairs_to_string,
    luma_plane,
)
from .binarize import binarize
from .detail import apply_detail
from .morphology import adjust_thickness


def binary_map_to_rgba(binary_map: BinaryMap) -> U8Image:
    """Grey RGBA image from a binary map, fully opaque."""
    H, W = binary_map.shape
    val = np.clip(binary_map, 0, 255).astype(np.uint8)
    out = np.empty((H, W, 4), dtype=np.uint8)
    out[..., 0] = val
    out[..., 1] = val
    out[..., 2] = val
    out[..., 3] = 255
    return out


def build_binary_map(
    rgba: U8Image, config: Union[SolidConfig, HollowConfig], *, debug: bool = False
) -> BinaryMap:
    """Final binary map for an RGBA image under a solid or hollow config."""
    mode = "solid" if isinstance(config, SolidConfig) else "hollow"
    t0 = time.perf_counter()
    luma = luma_plane(rgba)
    filtered = apply_detail(luma, config.detail_level, mode)
    t1 = time.perf_counter()
    raw = binarize(filtered, config)
    t2 = time.perf_counter()
    final = adjust_thickness(raw, config.thickness)
    t3 = time.perf_counter()

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Mode", mode),
                    ("Ink raw", format_percentage(ink_coverage(raw))),
                    ("Ink final", format_percentage(ink_coverage(final))),
                    ("Detail", format_seconds_compact(t1 - t0)),
                    ("Binarize", format_seconds_compact(t2 - t1)),
                    ("Thickness", format_seconds_compact(t3 - t2)),
                ]
            )
        )
    return final


def run_stencil(
    rgba: U8Image, config: Union[SolidConfig, HollowConfig], *, debug: bool = False
) -> Tuple[U8Image, BinaryMap]:
    """Returns (opaque grey RGBA, binary map)."""
    final = build_binary_map(rgba, config, debug=debug)
    return binary_map_to_rgba(final), final


__all__ = ["binary_map_to_rgba", "build_binary_map", "run_stencil"]
