# stencil_map/core_types.py
from __future__ import annotations

"""
Core type aliases, settings value object, errors, and lightweight helpers.
"""

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]

U8Image = NDArray[np.uint8]  # (H, W, 4) RGBA
LumaPlane = NDArray[np.float32]  # (H, W)
BinaryMap = NDArray[np.float32]  # (H, W), values {0 (ink), 255 (blank)}

Mode = Literal["solid", "hollow", "realism"]
MODES: Tuple[str, ...] = ("solid", "hollow", "realism")

INK = 0.0
BLANK = 255.0


# Errors


class StencilInputError(ValueError):
    """Input image is empty, malformed, or cannot be decoded."""


class StencilConfigError(ValueError):
    """Settings are out of range or inconsistent."""


# Value objects


@dataclass(frozen=True)
class StencilSettings:
    """
    Full settings record for one pipeline run.

    detail_level is read per mode: in solid mode a positive value is the
    pre-blur radius, in hollow mode it scales the DoG radii instead.
    Realism-only fields are optional; None means neutral.
    """

    threshold: int = 223
    thickness: int = 0
    detail_level: int = 0
    mode: Mode = "hollow"
    mirrored: bool = False
    multi_size: bool = False
    variant_count: int = 9
    min_size: float = 1.5  # inches
    max_size: float = 3.5  # inches
    show_dimensions: bool = True

    saturation: Optional[float] = None  # 0..500, 100 neutral
    contrast: Optional[float] = None  # 0..500, 100 neutral
    brightness: Optional[float] = None  # 0..500, 100 neutral
    sharpness: Optional[float] = None  # 0..10, 0 neutral
    brilliance: Optional[float] = None  # -100..100, 0 neutral


# Small helpers


def to_u8(values: np.ndarray) -> U8Image:
    """Round and clamp a float array into uint8, like a clamped byte buffer."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def assert_rgba_image(image: np.ndarray) -> U8Image:
    """Validate a non-empty uint8 (H,W,4) image and return it typed as U8Image."""
    if not isinstance(image, np.ndarray):
        raise StencilInputError("expected a numpy array")
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] != 4:
        raise StencilInputError(
            f"expected uint8 (H,W,4) image, got {image.dtype} {image.shape}"
        )
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise StencilInputError("image has zero area")
    return image  # type: ignore[return-value]


def assert_plane_2d(plane: np.ndarray) -> LumaPlane:
    """Validate a non-empty (H,W) plane and return it as float32."""
    if plane.ndim != 2 or plane.shape[0] == 0 or plane.shape[1] == 0:
        raise StencilInputError(f"expected non-empty (H,W) plane, got {plane.shape}")
    return plane.astype(np.float32, copy=False)


__all__ = [
    "RGBTuple",
    "U8Image",
    "LumaPlane",
    "BinaryMap",
    "Mode",
    "MODES",
    "INK",
    "BLANK",
    "StencilInputError",
    "StencilConfigError",
    "StencilSettings",
    "to_u8",
    "assert_rgba_image",
    "assert_plane_2d",
]
