# stencil_map/mode.py
from __future__ import annotations

"""
Mode resolution.

Exports:
- SolidConfig, HollowConfig, RealismConfig : per-mode views of StencilSettings
- Variant                                  : union of the three
- resolve_variant(settings) -> Variant

Notes:
- Solid and Hollow share the stencil path (luma, detail, binarize, morphology).
  Realism is the full-colour alternative and skips morphology.
- detail_level keeps one field but each stencil config reads it its own way.
"""

from dataclasses import dataclass
from typing import Union

from .core_types import StencilConfigError, StencilSettings


@dataclass(frozen=True)
class SolidConfig:
    """Adaptive threshold. detail_level > 0 is a pre-blur radius."""

    threshold: int
    detail_level: int
    thickness: int


@dataclass(frozen=True)
class HollowConfig:
    """Difference of Gaussians. detail_level > 0 widens both DoG radii."""

    threshold: int
    detail_level: int
    thickness: int


@dataclass(frozen=True)
class RealismConfig:
    """Tone mapping; every field at its neutral value is a no-op."""

    saturation: float = 100.0
    contrast: float = 100.0
    brightness: float = 100.0
    sharpness: float = 0.0
    brilliance: float = 0.0

    @property
    def is_neutral(self) -> bool:
        return (
            self.saturation == 100.0
            and self.contrast == 100.0
            and self.brightness == 100.0
            and self.sharpness <= 0.0
            and self.brilliance == 0.0
        )


Variant = Union[SolidConfig, HollowConfig, RealismConfig]


def _or_default(value, default: float) -> float:
    return float(default if value is None else value)


def resolve_variant(settings: StencilSettings) -> Variant:
    """Project a settings record onto the config for its mode."""
    if settings.mode == "solid":
        return SolidConfig(
            threshold=int(settings.threshold),
            detail_level=int(settings.detail_level),
            thickness=int(settings.thickness),
        )
    if settings.mode == "hollow":
        return HollowConfig(
            threshold=int(settings.threshold),
            detail_level=int(settings.detail_level),
            thickness=int(settings.thickness),
        )
    if settings.mode == "realism":
        return RealismConfig(
            saturation=_or_default(settings.saturation, 100.0),
            contrast=_or_default(settings.contrast, 100.0),
            brightness=_or_default(settings.brightness, 100.0),
            sharpness=_or_default(settings.sharpness, 0.0),
            brilliance=_or_default(settings.brilliance, 0.0),
        )
    raise StencilConfigError(f"unknown mode {settings.mode!r}")


__all__ = [
    "SolidConfig",
    "HollowConfig",
    "RealismConfig",
    "Variant",
    "resolve_variant",
]
