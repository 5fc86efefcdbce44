# stencil_map/stencil/__init__.py
"""
Stencil-mode API (solid and hollow).

Provides:
  run_stencil(rgba, config, *, debug=False) -> (rgba_out, binary_map)
    Turn an RGBA image into an ink/blank stencil.

    Args:
      rgba   : uint8 [H,W,4]
      config : SolidConfig (adaptive threshold) or HollowConfig (DoG outlines)
      debug  : bool, print ink coverage and stage timings

    Returns:
      rgba_out   : uint8 [H,W,4], grey 0/255, alpha 255
      binary_map : float32 [H,W], 0 = ink, 255 = blank

  adaptive_threshold, difference_of_gaussians, binarize : binarization
  apply_detail                                          : detail filter
  adjust_thickness                                      : dilation / erosion
"""

from .binarize import adaptive_threshold, binarize, difference_of_gaussians
from .detail import apply_detail
from .morphology import adjust_thickness
from .run import binary_map_to_rgba, build_binary_map, run_stencil

__all__ = [
    "adaptive_threshold",
    "difference_of_gaussians",
    "binarize",
    "apply_detail",
    "adjust_thickness",
    "binary_map_to_rgba",
    "build_binary_map",
    "run_stencil",
]
