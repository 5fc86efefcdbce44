# stencil_map/stencil/morphology.py
from __future__ import annotations

"""
Thickness adjustment by single-pixel 4-neighbour dilation / erosion.

Two buffers are copied once at entry and swap roles every pass.
Border handling differs per operation: dilation sees missing neighbours as
blank, erosion sees them as ink, so neither grows or eats in from the image
frame.
"""

import numpy as np

from ..constants import MORPH_MAX_PASSES
from ..core_types import BLANK, INK, BinaryMap


def _neighbour_masks(ink: np.ndarray, outside: bool):
    """(north, south, west, east) ink masks with out-of-bounds set to outside."""
    padded = np.pad(ink, 1, mode="constant", constant_values=outside)
    return (
        padded[:-2, 1:-1],
        padded[2:, 1:-1],
        padded[1:-1, :-2],
        padded[1:-1, 2:],
    )


def dilate_pass(src: BinaryMap, dst: BinaryMap) -> None:
    """Blank pixels touching ink become ink; ink stays ink."""
    ink = src < 128.0
    n, s, w, e = _neighbour_masks(ink, outside=False)
    grown = ink | n | s | w | e
    dst[...] = BLANK
    dst[grown] = INK


def erode_pass(src: BinaryMap, dst: BinaryMap) -> None:
    """Ink pixels touching blank become blank; blank stays blank."""
    ink = src < 128.0
    n, s, w, e = _neighbour_masks(ink, outside=True)
    kept = ink & n & s & w & e
    dst[...] = BLANK
    dst[kept] = INK


def adjust_thickness(binary_map: BinaryMap, thickness: int) -> BinaryMap:
    """
    Dilate (thickness > 0) or erode (thickness < 0) |thickness| times,
    capped at MORPH_MAX_PASSES. thickness == 0 returns a copy.
    """
    passes = min(abs(int(thickness)), MORPH_MAX_PASSES)
    buf_a = np.array(binary_map, dtype=np.float32, copy=True)
    if passes == 0:
        return buf_a
    buf_b = np.empty_like(buf_a)
    step = dilate_pass if thickness > 0 else erode_pass

    src, dst = buf_a, buf_b
    for _ in range(passes):
        step(src, dst)
        src, dst = dst, src
    return src


__all__ = ["dilate_pass", "erode_pass", "adjust_thickness"]
