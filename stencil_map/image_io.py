# stencil_map/image_io.py
from __future__ import annotations

import io
from pathlib import Path

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import MAX_PROCESS_DIM, PAGE_DPI
from .core_types import StencilInputError, U8Image, assert_rgba_image

"""
Image I/O helpers (RGBA uint8), the processing-size cap, mirroring, and
lossless page export.
"""


def _to_rgba_array(im: Image.Image) -> U8Image:
    im = ImageOps.exif_transpose(im)
    arr = np.array(im.convert("RGBA"), dtype=np.uint8)
    return assert_rgba_image(arr)


def decode_image_bytes(data: bytes) -> U8Image:
    """Decode any Pillow-readable buffer into RGBA. Raises StencilInputError."""
    if not data:
        raise StencilInputError("empty image buffer")
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            return _to_rgba_array(im)
    except (UnidentifiedImageError, OSError) as e:
        raise StencilInputError(f"cannot decode image: {e}") from e


def load_image_rgba(path: Path) -> U8Image:
    """Load an image file into RGBA, honouring EXIF orientation."""
    try:
        with Image.open(path) as im:
            im.load()
            return _to_rgba_array(im)
    except (UnidentifiedImageError, OSError) as e:
        raise StencilInputError(f"cannot read image {path}: {e}") from e


def cap_longest_edge(
    rgba: U8Image, max_dim: int = MAX_PROCESS_DIM
) -> U8Image:
    """Downsample (LANCZOS) so the longer edge is at most max_dim. Never upsamples."""
    H, W = rgba.shape[:2]
    if W <= max_dim and H <= max_dim:
        return rgba
    ratio = min(max_dim / W, max_dim / H)
    dst_w = max(1, int(round(W * ratio)))
    dst_h = max(1, int(round(H * ratio)))
    im = Image.fromarray(rgba).resize((dst_w, dst_h), Image.Resampling.LANCZOS)
    return np.array(im, dtype=np.uint8)


def mirror_horizontal(rgba: U8Image) -> U8Image:
    """Left-right flip as a new contiguous array."""
    return np.ascontiguousarray(rgba[:, ::-1])


def encode_png(page: Image.Image) -> bytes:
    """Encode an image as PNG bytes with the page DPI recorded."""
    buf = io.BytesIO()
    page.save(buf, format="PNG", dpi=(PAGE_DPI, PAGE_DPI))
    return buf.getvalue()


def save_page(path: Path, page: Image.Image, fmt: str = "png") -> Path:
    """
    Write a composed page. "png" (default, lossless) or "pdf" (one page at
    the page DPI). The suffix is forced to match the format.
    """
    fmt = fmt.lower()
    if fmt not in ("png", "pdf"):
        raise ValueError(f"unsupported output format {fmt!r}")
    if path.suffix.lower() != f".{fmt}":
        path = path.with_suffix(f".{fmt}")
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "pdf":
        page.convert("RGB").save(path, format="PDF", resolution=float(PAGE_DPI))
    else:
        page.save(path, format="PNG", dpi=(PAGE_DPI, PAGE_DPI))
    return path


__all__ = [
    "decode_image_bytes",
    "load_image_rgba",
    "cap_longest_edge",
    "mirror_horizontal",
    "encode_png",
    "save_page",
]
