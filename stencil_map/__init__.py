# stencil_map/__init__.py
"""
stencil_map package.

Purpose:
  Turn photos into print-ready stencils laid out on an A4 page. See make_stencil.py for the CLI.

Public API:
  generate_stencil     : rgba + settings -> composed page (PIL image).
  generate_stencil_png : same, PNG-encoded bytes.
  process_image_bytes  : encoded image in, PNG page out.
  process_many         : independent images on a thread pool.
  StencilSettings      : settings record (build_settings fills defaults/presets).
  stencil              : solid / hollow binarization and thickness.
  realism              : full-colour tone mapping.
  compose              : page planning and rendering (PageConfig).
  image_io             : decode / load / cap / mirror / save helpers.
  utils                : box blur, luma, convolution, logging.

Quick start:
  from stencil_map import build_settings, generate_stencil
  from stencil_map.image_io import load_image_rgba
  page = generate_stencil(load_image_rgba(path), build_settings(preset="bold", overrides={"mode": "solid"}))
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import compose
from . import core_types
from . import image_io
from . import realism
from . import stencil
from . import utils

from .compose import PageConfig  # noqa: E402,F401
from .core_types import (  # noqa: E402,F401
    StencilConfigError,
    StencilInputError,
    StencilSettings,
)
from .pipeline import (  # noqa: E402,F401
    BatchResult,
    generate_stencil,
    generate_stencil_png,
    process_image_bytes,
    process_many,
    process_raster,
)
from .settings import build_settings  # noqa: E402,F401

__all__ = [
    "__version__",
    "compose",
    "core_types",
    "image_io",
    "realism",
    "stencil",
    "utils",
    "PageConfig",
    "StencilSettings",
    "StencilInputError",
    "StencilConfigError",
    "BatchResult",
    "build_settings",
    "generate_stencil",
    "generate_stencil_png",
    "process_image_bytes",
    "process_many",
    "process_raster",
]
