# stencil_map/realism/__init__.py
"""
Realism-mode API.

Provides:
  run_realism(rgba, config, *, debug=False) -> U8Image
    Tone-map an RGBA image in full colour (no binarization, no morphology).

    Args:
      rgba   : uint8 [H,W,4]
      config : RealismConfig (saturation, contrast, brightness, sharpness, brilliance)
      debug  : bool, print stage timing

    Returns:
      uint8 [H,W,4]. Alpha is copied through unchanged.

    Notes:
      - All fields at neutral return a pixel-identical copy.
      - Steps: contrast/brightness, vibrance, brilliance, sharpen.
"""

from .tone import (
    apply_brilliance,
    apply_vibrance,
    brilliance_curve,
    prefilter,
    run_realism,
    sharpen,
    sharpen_kernel,
)

__all__ = [
    "prefilter",
    "apply_vibrance",
    "brilliance_curve",
    "apply_brilliance",
    "sharpen_kernel",
    "sharpen",
    "run_realism",
]
