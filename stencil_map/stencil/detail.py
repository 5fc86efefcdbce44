# stencil_map/stencil/detail.py
from __future__ import annotations

"""
Detail filter applied to luma before binarization.

detail_level < 0 : unsharp mask, strength |d| * 0.5 over a radius-1 blur.
detail_level > 0 : solid mode blurs with radius d; hollow mode leaves the
                   plane alone and spends d on the DoG radii instead.
detail_level = 0 : passthrough.
"""

import numpy as np

from ..constants import SHARPEN_BLUR_RADIUS, SHARPEN_STRENGTH_PER_STEP
from ..core_types import LumaPlane, Mode
from ..utils import box_blur


def unsharp_mask(luma: LumaPlane, detail_level: int) -> LumaPlane:
    """Sharpen luma; strength grows with the magnitude of a negative detail level."""
    strength = abs(detail_level) * SHARPEN_STRENGTH_PER_STEP
    blurred = box_blur(luma, SHARPEN_BLUR_RADIUS)
    detail = luma.astype(np.float64) - blurred
    out = np.clip(luma + detail * strength, 0.0, 255.0)
    return out.astype(np.float32)


def apply_detail(luma: LumaPlane, detail_level: int, mode: Mode) -> LumaPlane:
    """Return the detail-filtered luma for the given stencil mode."""
    if detail_level < 0:
        return unsharp_mask(luma, detail_level)
    if detail_level > 0 and mode == "solid":
        return box_blur(luma, int(detail_level))
    return luma


__all__ = ["unsharp_mask", "apply_detail"]
