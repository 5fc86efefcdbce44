# stencil_map/compose.py
from __future__ import annotations

"""
Page composition: place a processed raster on a fixed-size white page.

- Single mode: fit inside the page padding, aspect kept, centred.
- Multi-size mode: 3 / 6 / 9 cells (1x3, 2x3, 3x3). Cell i shows the image
  with its longer side at min + (max - min) * i / (n - 1) inches, centred in
  the cell, with an optional size label under it. When the label would land
  on or past the cell's bottom edge it is drawn over the image instead.

Geometry is planned in float page pixels first (plan_single / plan_grid) and
only rounded when pasting, so layouts can be checked without rendering.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .constants import (
    A4_HEIGHT_PX,
    A4_WIDTH_PX,
    GRID_LAYOUTS,
    LABEL_FONT_CANDIDATES,
    LABEL_FONT_PX,
    LABEL_GAP_PX,
    LABEL_INK,
    LABEL_INSET_PX,
    PAGE_BACKGROUND,
    PAGE_DPI,
    PAGE_PADDING_PX,
)
from .core_types import RGBTuple, StencilSettings, U8Image, assert_rgba_image
from .settings import normalized_variant_count
from .utils import pillow_resample_from_name

# --------------------------- data ---------------------------


@dataclass(frozen=True)
class PageConfig:
    """Target page geometry and label typography. Defaults are A4 at 300 DPI."""

    width_px: int = A4_WIDTH_PX
    height_px: int = A4_HEIGHT_PX
    dpi: int = PAGE_DPI
    padding_px: int = PAGE_PADDING_PX
    background: RGBTuple = PAGE_BACKGROUND
    label_ink: RGBTuple = LABEL_INK
    label_font_px: int = LABEL_FONT_PX
    label_gap_px: int = LABEL_GAP_PX
    label_inset_px: int = LABEL_INSET_PX
    font_candidates: Tuple[str, ...] = tuple(LABEL_FONT_CANDIDATES)
    resample: str = "lanczos"


@dataclass(frozen=True)
class Placement:
    """Image rectangle on the page, top-left origin, float pixels."""

    x: float
    y: float
    width: float
    height: float

    def box(self) -> Tuple[int, int, int, int]:
        """(x0, y0, w, h) rounded for pasting; size is at least 1 px."""
        return (
            int(round(self.x)),
            int(round(self.y)),
            max(1, int(round(self.width))),
            max(1, int(round(self.height))),
        )


@dataclass(frozen=True)
class CellPlacement:
    index: int
    row: int
    col: int
    size_in: float
    image: Placement
    label: Optional[str] = None
    label_x: float = 0.0  # horizontal centre
    label_y: float = 0.0  # baseline
    label_overlaid: bool = False


# --------------------------- planning ---------------------------


def grid_shape(variant_count: int) -> Tuple[int, int]:
    """(cols, rows) for a variant count; unknown counts use the 3x3 grid."""
    return GRID_LAYOUTS[normalized_variant_count(variant_count)]


def variant_sizes(min_size: float, max_size: float, variant_count: int) -> List[float]:
    """Longer-side sizes in inches, linearly spaced from min to max."""
    count = normalized_variant_count(variant_count)
    span = float(max_size) - float(min_size)
    return [float(min_size) + span * i / (count - 1) for i in range(count)]


def format_size_label(size_in: float) -> str:
    """One decimal place, halves rounded away from zero, then an inch mark."""
    text = Decimal(size_in).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f'{text}"'


def _fit_longest_side(img_w: int, img_h: int, longest: float) -> Tuple[float, float]:
    aspect = img_w / img_h
    if img_w >= img_h:
        return longest, longest / aspect
    return longest * aspect, longest


def plan_single(img_w: int, img_h: int, page: PageConfig = PageConfig()) -> Placement:
    """Largest aspect-preserving rectangle inside the padding, centred."""
    aspect = img_w / img_h
    avail_w = page.width_px - 2 * page.padding_px
    avail_h = page.height_px - 2 * page.padding_px

    draw_w = float(avail_w)
    draw_h = avail_w / aspect
    if draw_h > avail_h:
        draw_h = float(avail_h)
        draw_w = avail_h * aspect

    return Placement(
        x=(page.width_px - draw_w) / 2.0,
        y=(page.height_px - draw_h) / 2.0,
        width=draw_w,
        height=draw_h,
    )


def plan_grid(
    img_w: int,
    img_h: int,
    variant_count: int,
    min_size: float,
    max_size: float,
    show_dimensions: bool,
    page: PageConfig = PageConfig(),
) -> List[CellPlacement]:
    """Cell-by-cell placements for multi-size mode, row-major."""
    cols, rows = grid_shape(variant_count)
    cell_w = page.width_px / cols
    cell_h = page.height_px / rows

    cells: List[CellPlacement] = []
    for i, size_in in enumerate(variant_sizes(min_size, max_size, variant_count)):
        draw_w, draw_h = _fit_longest_side(img_w, img_h, size_in * page.dpi)
        col = i % cols
        row = i // cols
        cx = col * cell_w + cell_w / 2.0
        cy = row * cell_h + cell_h / 2.0
        image = Placement(
            x=cx - draw_w / 2.0, y=cy - draw_h / 2.0, width=draw_w, height=draw_h
        )

        label = None
        label_y = 0.0
        overlaid = False
        if show_dimensions:
            label = format_size_label(size_in)
            label_y = cy + draw_h / 2.0 + page.label_gap_px
            cell_bottom = (row + 1) * cell_h
            if label_y >= cell_bottom:
                label_y = cell_bottom - page.label_inset_px
                overlaid = True

        cells.append(
            CellPlacement(
                index=i,
                row=row,
                col=col,
                size_in=size_in,
                image=image,
                label=label,
                label_x=cx,
                label_y=label_y,
                label_overlaid=overlaid,
            )
        )
    return cells


# --------------------------- rendering ---------------------------


def load_label_font(
    size_px: int, candidates: Tuple[str, ...] = tuple(LABEL_FONT_CANDIDATES)
) -> Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]:
    """First bold TrueType font found, else Pillow's default at the same size."""
    for p in candidates:
        try:
            if Path(p).exists():
                return ImageFont.truetype(p, size_px)
        except OSError:
            continue
    return ImageFont.load_default(size=size_px)


def _draw_label(
    draw: ImageDraw.ImageDraw,
    text: str,
    centre_x: float,
    baseline_y: float,
    font: Union[ImageFont.FreeTypeFont, ImageFont.ImageFont],
    ink: RGBTuple,
) -> None:
    if isinstance(font, ImageFont.FreeTypeFont):
        draw.text((centre_x, baseline_y), text, fill=ink, font=font, anchor="ms")
        return
    # bitmap fonts have no anchors; centre the bbox and sit its bottom on the baseline
    x0, y0, x1, y1 = draw.textbbox((0, 0), text, font=font)
    draw.text(
        (centre_x - (x1 - x0) / 2.0, baseline_y - (y1 - y0)), text, fill=ink, font=font
    )


def _to_pil(raster: Union[U8Image, Image.Image]) -> Image.Image:
    if isinstance(raster, Image.Image):
        return raster.convert("RGBA")
    return Image.fromarray(assert_rgba_image(np.ascontiguousarray(raster)))


def _paste_scaled(
    page_img: Image.Image, src: Image.Image, placement: Placement, resample: int
) -> None:
    x0, y0, w, h = placement.box()
    scaled = src if (w, h) == src.size else src.resize((w, h), resample)
    page_img.paste(scaled, (x0, y0), scaled)


def compose_page(
    raster: Union[U8Image, Image.Image],
    settings: StencilSettings,
    page: PageConfig = PageConfig(),
) -> Image.Image:
    """Render the page for a processed raster. Returns an RGB image of page size."""
    src = _to_pil(raster)
    img_w, img_h = src.size
    resample = pillow_resample_from_name(page.resample)
    page_img = Image.new("RGB", (page.width_px, page.height_px), page.background)

    if not settings.multi_size:
        _paste_scaled(page_img, src, plan_single(img_w, img_h, page), resample)
        return page_img

    cells = plan_grid(
        img_w,
        img_h,
        settings.variant_count,
        settings.min_size,
        settings.max_size,
        settings.show_dimensions,
        page,
    )
    draw = ImageDraw.Draw(page_img)
    font = load_label_font(page.label_font_px, page.font_candidates)
    for cell in cells:
        _paste_scaled(page_img, src, cell.image, resample)
        if cell.label is not None:
            _draw_label(draw, cell.label, cell.label_x, cell.label_y, font, page.label_ink)
    return page_img


def layout_manifest(
    img_w: int, img_h: int, settings: StencilSettings, page: PageConfig = PageConfig()
) -> Dict[str, Any]:
    """JSON-ready description of where everything lands on the page."""
    manifest: Dict[str, Any] = {
        "page_width": page.width_px,
        "page_height": page.height_px,
        "dpi": page.dpi,
        "source_width": img_w,
        "source_height": img_h,
        "multi_size": settings.multi_size,
    }
    if not settings.multi_size:
        x0, y0, w, h = plan_single(img_w, img_h, page).box()
        manifest["placed"] = [{"x0": x0, "y0": y0, "width": w, "height": h}]
        return manifest

    cols, rows = grid_shape(settings.variant_count)
    manifest["grid"] = {"cols": cols, "rows": rows}
    placed = []
    for cell in plan_grid(
        img_w,
        img_h,
        settings.variant_count,
        settings.min_size,
        settings.max_size,
        settings.show_dimensions,
        page,
    ):
        x0, y0, w, h = cell.image.box()
        placed.append(
            {
                "index": cell.index,
                "row": cell.row,
                "col": cell.col,
                "size_in": round(cell.size_in, 4),
                "x0": x0,
                "y0": y0,
                "width": w,
                "height": h,
                "label": cell.label,
                "label_overlaid": cell.label_overlaid,
            }
        )
    manifest["placed"] = placed
    return manifest


__all__ = [
    "PageConfig",
    "Placement",
    "CellPlacement",
    "grid_shape",
    "variant_sizes",
    "format_size_label",
    "plan_single",
    "plan_grid",
    "load_label_font",
    "compose_page",
    "layout_manifest",
]
