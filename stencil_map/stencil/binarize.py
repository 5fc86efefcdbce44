# stencil_map/stencil/binarize.py
from __future__ import annotations

"""
Binarization: luma plane -> binary map (0 = ink, 255 = blank).

- adaptive_threshold       : solid fills. Ink where a pixel is darker than its
                             local mean by more than a bias.
- difference_of_gaussians  : outlines. Ink where the narrow blur falls below
                             the wide blur by more than a cutoff.

Both compare strictly, so a pixel sitting exactly on the boundary is blank.
"""

import math
from typing import Tuple, Union

import numpy as np

from ..constants import (
    DOG_BASE_CUTOFF,
    DOG_CUTOFF_RANGE,
    DOG_MIN_RADIUS,
    DOG_RADIUS_PER_STEP,
    DOG_RADIUS_RATIO,
    LOCAL_MEAN_RADIUS,
    THRESHOLD_BIAS_DIVISOR,
)
from ..core_types import BLANK, INK, BinaryMap, LumaPlane
from ..mode import HollowConfig, SolidConfig
from ..utils import box_blur


def threshold_bias(threshold: int) -> float:
    """Bias below the local mean. Higher threshold -> smaller bias -> more ink."""
    return (255.0 - float(threshold)) / THRESHOLD_BIAS_DIVISOR


def adaptive_threshold(filtered: LumaPlane, threshold: int) -> BinaryMap:
    """Compare each pixel to a fixed-radius local mean shifted by the bias."""
    local_mean = box_blur(filtered, LOCAL_MEAN_RADIUS)
    bias = threshold_bias(threshold)
    ink = filtered < (local_mean - bias)
    return np.where(ink, INK, BLANK).astype(np.float32)


def dog_radii(detail_level: int) -> Tuple[int, int]:
    """Integer blur radii for the narrow and wide DoG passes."""
    effective = max(0, detail_level)
    r1 = max(DOG_MIN_RADIUS, effective * DOG_RADIUS_PER_STEP)
    r2 = r1 * DOG_RADIUS_RATIO
    return int(math.ceil(r1)), int(math.ceil(r2))


def dog_cutoff(threshold: int) -> float:
    sensitivity = (255.0 - float(threshold)) / 255.0
    return DOG_BASE_CUTOFF + sensitivity * DOG_CUTOFF_RANGE


def difference_of_gaussians(
    filtered: LumaPlane, threshold: int, detail_level: int
) -> BinaryMap:
    """
    Edge map from two box blurs of the same plane.

    detail_level here scales the blur radii; it is the same control that sets
    the pre-blur radius in solid mode.
    """
    r_narrow, r_wide = dog_radii(detail_level)
    blur_narrow = box_blur(filtered, r_narrow)
    blur_wide = box_blur(filtered, r_wide)
    cutoff = dog_cutoff(threshold)
    diff = blur_narrow.astype(np.float64) - blur_wide
    return np.where(diff < -cutoff, INK, BLANK).astype(np.float32)


def binarize(filtered: LumaPlane, config: Union[SolidConfig, HollowConfig]) -> BinaryMap:
    """Dispatch to the algorithm for the config's mode."""
    if isinstance(config, SolidConfig):
        return adaptive_threshold(filtered, config.threshold)
    if isinstance(config, HollowConfig):
        return difference_of_gaussians(filtered, config.threshold, config.detail_level)
    raise TypeError(f"no binarization for {type(config).__name__}")


__all__ = [
    "threshold_bias",
    "adaptive_threshold",
    "dog_radii",
    "dog_cutoff",
    "difference_of_gaussians",
    "binarize",
]
