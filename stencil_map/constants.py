"""
Global tunables used across the project.

- Processing cap and filter radii (stencil paths)
- Morphology pass cap
- Page geometry (A4 at 300 DPI) and label typography
- Default settings and presets
"""
from __future__ import annotations

from typing import Dict, List, Tuple

# =========================
# Processing
# =========================

# Longer edge cap before any processing. Hard ceiling, not a per-call option.
MAX_PROCESS_DIM = 2500

# Local mean radius for adaptive threshold. Simulates local lighting.
LOCAL_MEAN_RADIUS = 16

# Adaptive threshold bias = (255 - threshold) / THRESHOLD_BIAS_DIVISOR
THRESHOLD_BIAS_DIVISOR = 5.0

# Unsharp mask for negative detail levels.
SHARPEN_BLUR_RADIUS = 1
SHARPEN_STRENGTH_PER_STEP = 0.5

# Difference of Gaussians radii.
DOG_MIN_RADIUS = 0.5
DOG_RADIUS_PER_STEP = 0.8
DOG_RADIUS_RATIO = 2.5
DOG_BASE_CUTOFF = 2.0
DOG_CUTOFF_RANGE = 10.0

# Morphology
# Thickness has no settings range; any magnitude is accepted and capped here.
MORPH_MAX_PASSES = 15

# Realism
VIBRANCE_POP_BASE = 1.05
VIBRANCE_POP_PER_STRENGTH = 0.02
BRILLIANCE_SHADOW_POWER = 5
BRILLIANCE_HIGHLIGHT_POWER = 4
BRILLIANCE_HIGHLIGHT_DAMP = 0.4
BRILLIANCE_STRETCH = 0.5
BRILLIANCE_FLATTEN = 0.5
BRILLIANCE_MIN_LUMA = 1e-6

# =========================
# Page
# =========================

PAGE_DPI = 300
A4_WIDTH_PX = 2480  # 8.27 in * 300
A4_HEIGHT_PX = 3508  # 11.69 in * 300
PAGE_PADDING_PX = 100
PAGE_BACKGROUND: Tuple[int, int, int] = (255, 255, 255)
LABEL_INK: Tuple[int, int, int] = (0, 0, 0)
LABEL_FONT_PX = 40
LABEL_GAP_PX = 50  # baseline distance below the image
LABEL_INSET_PX = 20  # baseline distance above the cell edge when overlaid

# variant_count -> (cols, rows). Anything else falls back to 9.
GRID_LAYOUTS: Dict[int, Tuple[int, int]] = {
    3: (1, 3),
    6: (2, 3),
    9: (3, 3),
}
DEFAULT_VARIANT_COUNT = 9

# Bold fonts tried in order for size labels; Pillow's default font is the fallback.
LABEL_FONT_CANDIDATES: List[str] = [
    r"C:\Windows\Fonts\arialbd.ttf",
    "/Library/Fonts/Arial Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
]

# =========================
# Settings ranges, defaults, presets
# =========================

THRESHOLD_RANGE = (0, 255)
DETAIL_RANGE = (-4, 5)
SIZE_RANGE_IN = (0.5, 9.0)
TONE_RANGE = (0.0, 500.0)  # saturation / contrast / brightness
SHARPNESS_RANGE = (0.0, 10.0)
BRILLIANCE_RANGE = (-100.0, 100.0)

DEFAULT_SETTINGS: Dict[str, object] = {
    "threshold": 223,
    "thickness": 0,
    "detail_level": 0,
    "mode": "hollow",
    "mirrored": False,
    "multi_size": False,
    "variant_count": 9,
    "min_size": 1.5,
    "max_size": 3.5,
    "show_dimensions": True,
}

PRESETS: Dict[str, Dict[str, object]] = {
    "fineline": {"threshold": 223, "detail_level": 0, "thickness": 0},
    "bold": {"threshold": 238, "detail_level": 3, "thickness": 1},
}

# Output naming
OUTPUT_SUFFIX = "_stencil"
IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".tif", ".tiff"}

__all__ = [
    "MAX_PROCESS_DIM",
    "LOCAL_MEAN_RADIUS",
    "THRESHOLD_BIAS_DIVISOR",
    "SHARPEN_BLUR_RADIUS",
    "SHARPEN_STRENGTH_PER_STEP",
    "DOG_MIN_RADIUS",
    "DOG_RADIUS_PER_STEP",
    "DOG_RADIUS_RATIO",
    "DOG_BASE_CUTOFF",
    "DOG_CUTOFF_RANGE",
    "MORPH_MAX_PASSES",
    "VIBRANCE_POP_BASE",
    "VIBRANCE_POP_PER_STRENGTH",
    "BRILLIANCE_SHADOW_POWER",
    "BRILLIANCE_HIGHLIGHT_POWER",
    "BRILLIANCE_HIGHLIGHT_DAMP",
    "BRILLIANCE_STRETCH",
    "BRILLIANCE_FLATTEN",
    "BRILLIANCE_MIN_LUMA",
    "PAGE_DPI",
    "A4_WIDTH_PX",
    "A4_HEIGHT_PX",
    "PAGE_PADDING_PX",
    "PAGE_BACKGROUND",
    "LABEL_INK",
    "LABEL_FONT_PX",
    "LABEL_GAP_PX",
    "LABEL_INSET_PX",
    "GRID_LAYOUTS",
    "DEFAULT_VARIANT_COUNT",
    "LABEL_FONT_CANDIDATES",
    "THRESHOLD_RANGE",
    "DETAIL_RANGE",
    "SIZE_RANGE_IN",
    "TONE_RANGE",
    "SHARPNESS_RANGE",
    "BRILLIANCE_RANGE",
    "DEFAULT_SETTINGS",
    "PRESETS",
    "OUTPUT_SUFFIX",
    "IMAGE_EXTS",
]
