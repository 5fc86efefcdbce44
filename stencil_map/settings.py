# stencil_map/settings.py
from __future__ import annotations

"""
Settings construction and validation.

Exports:
- build_settings(preset=None, overrides=None) -> StencilSettings
- load_settings_file(path) -> dict
- validate_settings(settings) -> StencilSettings
- normalized_variant_count(count) -> int

Notes:
- Defaults come from constants.DEFAULT_SETTINGS; a preset is layered on top,
  then explicit overrides. The core only ever sees a full record.
- variant_count outside {3,6,9} is not an error; it resolves to 9.
"""

import json
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .constants import (
    BRILLIANCE_RANGE,
    DEFAULT_SETTINGS,
    DEFAULT_VARIANT_COUNT,
    DETAIL_RANGE,
    GRID_LAYOUTS,
    PRESETS,
    SHARPNESS_RANGE,
    SIZE_RANGE_IN,
    THRESHOLD_RANGE,
    TONE_RANGE,
)
from .core_types import MODES, StencilConfigError, StencilSettings


_FIELD_NAMES = {f.name for f in fields(StencilSettings)}


def normalized_variant_count(count: Optional[int]) -> int:
    """Return count when it has a grid layout, else the 9-variant fallback."""
    if count in GRID_LAYOUTS:
        return int(count)  # type: ignore[arg-type]
    return DEFAULT_VARIANT_COUNT


_NUMERIC_FIELDS = ("threshold", "detail_level", "min_size", "max_size")
_OPTIONAL_NUMERIC_FIELDS = (
    "saturation",
    "contrast",
    "brightness",
    "sharpness",
    "brilliance",
)
_BOOL_FIELDS = ("mirrored", "multi_size", "show_dimensions")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_types(settings: StencilSettings) -> None:
    """Reject values of the wrong type, e.g. strings from a settings file."""
    if not isinstance(settings.mode, str) or settings.mode not in MODES:
        raise StencilConfigError(f"unknown mode {settings.mode!r}; expected one of {MODES}")
    for name in ("thickness", "variant_count"):
        value = getattr(settings, name)
        if not _is_int(value):
            raise StencilConfigError(f"{name} must be an int, got {value!r}")
    optional = [n for n in _OPTIONAL_NUMERIC_FIELDS if getattr(settings, n) is not None]
    for name in (*_NUMERIC_FIELDS, *optional):
        value = getattr(settings, name)
        if not (_is_int(value) or isinstance(value, float)):
            raise StencilConfigError(f"{name} must be a number, got {value!r}")
    for name in _BOOL_FIELDS:
        value = getattr(settings, name)
        if not isinstance(value, bool):
            raise StencilConfigError(f"{name} must be true or false, got {value!r}")


def _check_range(name: str, value: Any, lo: float, hi: float) -> None:
    if value is None:
        return
    if not (lo <= value <= hi):
        raise StencilConfigError(f"{name}={value} outside [{lo}, {hi}]")


def validate_settings(settings: StencilSettings) -> StencilSettings:
    """
    Check types, ranges and cross-field rules. Returns the same record.

    Raises StencilConfigError for a value of the wrong type, an out-of-range
    value, an unknown mode, or min_size > max_size in multi-size mode.
    Thickness has no range: morphology caps it at MORPH_MAX_PASSES passes.
    """
    _check_types(settings)
    _check_range("threshold", settings.threshold, *THRESHOLD_RANGE)
    _check_range("detail_level", settings.detail_level, *DETAIL_RANGE)
    _check_range("saturation", settings.saturation, *TONE_RANGE)
    _check_range("contrast", settings.contrast, *TONE_RANGE)
    _check_range("brightness", settings.brightness, *TONE_RANGE)
    _check_range("sharpness", settings.sharpness, *SHARPNESS_RANGE)
    _check_range("brilliance", settings.brilliance, *BRILLIANCE_RANGE)
    if settings.multi_size:
        _check_range("min_size", settings.min_size, *SIZE_RANGE_IN)
        _check_range("max_size", settings.max_size, *SIZE_RANGE_IN)
        if settings.min_size > settings.max_size:
            raise StencilConfigError(
                f"min_size {settings.min_size} > max_size {settings.max_size}"
            )
    return settings


def build_settings(
    preset: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None
) -> StencilSettings:
    """Defaults, then preset values, then explicit overrides (None values skipped)."""
    values: Dict[str, Any] = dict(DEFAULT_SETTINGS)
    if preset is not None:
        if preset not in PRESETS:
            raise StencilConfigError(
                f"unknown preset {preset!r}; expected one of {sorted(PRESETS)}"
            )
        values.update(PRESETS[preset])
    for key, value in (overrides or {}).items():
        if key not in _FIELD_NAMES:
            raise StencilConfigError(f"unknown setting {key!r}")
        if value is not None:
            values[key] = value
    if isinstance(values.get("mode"), str):
        values["mode"] = values["mode"].lower()
    return validate_settings(StencilSettings(**values))


def load_settings_file(path: Path) -> Dict[str, Any]:
    """Read a JSON object of settings fields. Keys are checked by build_settings."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise StencilConfigError(f"invalid settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise StencilConfigError(f"settings file {path} must hold a JSON object")
    return data


__all__ = [
    "normalized_variant_count",
    "validate_settings",
    "build_settings",
    "load_settings_file",
]
