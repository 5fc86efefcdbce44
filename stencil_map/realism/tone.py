# stencil_map/realism/tone.py
from __future__ import annotations

"""
Realism tone mapping on full RGB. Alpha is never touched.

Steps run in order and each one is skipped at its neutral value:
  1. contrast / brightness pre-filter (percent, 100 = identity)
  2. vibrance (saturation 100 = identity), muted colours boosted most
  3. brilliance curve (0 = identity), shadow lift and highlight damp
  4. sharpen (0 = identity), 3x3 kernel summing to 1

Every step writes back through round-and-clamp into uint8, so the result of
one step is what the next one sees.
"""

import time
from typing import List

import numpy as np

from ..constants import (
    BRILLIANCE_FLATTEN,
    BRILLIANCE_HIGHLIGHT_DAMP,
    BRILLIANCE_HIGHLIGHT_POWER,
    BRILLIANCE_MIN_LUMA,
    BRILLIANCE_SHADOW_POWER,
    BRILLIANCE_STRETCH,
    VIBRANCE_POP_BASE,
    VIBRANCE_POP_PER_STRENGTH,
)
from ..core_types import U8Image, to_u8
from ..mode import RealismConfig
from ..utils import (
    convolve_rgb,
    debug_log,
    format_seconds_compact,
    key_value_pairs_to_string,
)


def _rgb(rgba: U8Image) -> np.ndarray:
    return rgba[..., :3].astype(np.float64)


def _with_rgb(rgba: U8Image, rgb: np.ndarray) -> U8Image:
    out = rgba.copy()
    out[..., :3] = to_u8(rgb)
    return out


def prefilter(rgba: U8Image, contrast: float, brightness: float) -> U8Image:
    """CSS-style contrast(c%) then brightness(b%)."""
    if contrast == 100.0 and brightness == 100.0:
        return rgba.copy()
    rgb = _rgb(rgba)
    if contrast != 100.0:
        rgb = np.clip((rgb - 127.5) * (contrast / 100.0) + 127.5, 0.0, 255.0)
    if brightness != 100.0:
        rgb = np.clip(rgb * (brightness / 100.0), 0.0, 255.0)
    return _with_rgb(rgba, rgb)


def apply_vibrance(rgba: U8Image, saturation: float) -> U8Image:
    """
    Saturation as vibrance.

    strength = (saturation - 100) / 100. Positive strength boosts each pixel by
    strength * (1 - sat^2), so muted tones move more than vivid ones, and adds
    a small contrast pop. Negative strength desaturates linearly.
    """
    if saturation == 100.0:
        return rgba.copy()
    strength = (saturation - 100.0) / 100.0
    rgb = _rgb(rgba)
    mx = rgb.max(axis=-1)
    mn = rgb.min(axis=-1)
    sat = np.divide(mx - mn, mx, out=np.zeros_like(mx), where=mx > 0)

    if strength >= 0:
        boost = strength * (1.0 - sat * sat)
    else:
        boost = np.full_like(sat, strength)

    gray = rgb[..., 0] * 0.299 + rgb[..., 1] * 0.587 + rgb[..., 2] * 0.114
    gray = gray[..., None]
    out = gray + (rgb - gray) * (1.0 + boost)[..., None]

    if strength > 0:
        pop = VIBRANCE_POP_BASE + strength * VIBRANCE_POP_PER_STRENGTH
        out = (out - 128.0) * pop + 128.0
    return _with_rgb(rgba, out)


def brilliance_curve(y: np.ndarray, strength: float) -> np.ndarray:
    """Map normalized luma y in [0,1] through the brilliance curve."""
    if strength > 0:
        shadow_lift = (1.0 - y) ** BRILLIANCE_SHADOW_POWER * strength
        highlight_damp = y**BRILLIANCE_HIGHLIGHT_POWER * BRILLIANCE_HIGHLIGHT_DAMP * strength
        lifted = y + shadow_lift - highlight_damp
        stretched = (lifted - 0.5) * (1.0 + BRILLIANCE_STRETCH * strength) + 0.5
        return np.clip(stretched, 0.0, 1.0)
    return y * (1.0 + strength * BRILLIANCE_FLATTEN)


def apply_brilliance(rgba: U8Image, brilliance: float) -> U8Image:
    """Rescale RGB by new_y / y so hue is kept. Near-black pixels are left as is."""
    if brilliance == 0.0:
        return rgba.copy()
    strength = brilliance / 100.0
    rgb = _rgb(rgba)
    y = (rgb[..., 0] * 0.299 + rgb[..., 1] * 0.587 + rgb[..., 2] * 0.114) / 255.0
    new_y = brilliance_curve(y, strength)
    ratio = np.divide(
        new_y, y, out=np.ones_like(y), where=y > BRILLIANCE_MIN_LUMA
    )
    return _with_rgb(rgba, rgb * ratio[..., None])


def sharpen_kernel(sharpness: float) -> List[float]:
    s = float(sharpness)
    return [0.0, -s, 0.0, -s, 4.0 * s + 1.0, -s, 0.0, -s, 0.0]


def sharpen(rgba: U8Image, sharpness: float) -> U8Image:
    """Cross-shaped high-pass boost; the kernel sums to 1 so mean level holds."""
    if sharpness <= 0:
        return rgba.copy()
    return convolve_rgb(rgba, sharpen_kernel(sharpness))


def run_realism(
    rgba: U8Image, config: RealismConfig, *, debug: bool = False
) -> U8Image:
    """Apply the full tone-mapping chain. Neutral settings return an equal copy."""
    t0 = time.perf_counter()
    out = prefilter(rgba, config.contrast, config.brightness)
    out = apply_vibrance(out, config.saturation)
    out = apply_brilliance(out, config.brilliance)
    out = sharpen(out, config.sharpness)
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Mode", "realism"),
                    ("Neutral", config.is_neutral),
                    ("Tone", format_seconds_compact(time.perf_counter() - t0)),
                ]
            )
        )
    return out


__all__ = [
    "prefilter",
    "apply_vibrance",
    "brilliance_curve",
    "apply_brilliance",
    "sharpen_kernel",
    "sharpen",
    "run_realism",
]
