"""Render and export settings for :mod:`pdfrasterx`."""

from __future__ import annotations

import dataclasses
from typing import Any

from .exceptions import ConfigurationError

MIN_SCALE = 0.5
MAX_SCALE = 3.0
MIN_QUALITY = 0.1
MAX_QUALITY = 1.0

DEFAULT_SCALE = 2.0
DEFAULT_QUALITY = 0.85
DEFAULT_STITCH_QUALITY = 0.8


def _check_range(name: str, value: float, low: float, high: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc
    if not low <= number <= high:
        raise ConfigurationError(f"{name} must be between {low} and {high}, got {number}")
    return number


def jpeg_quality(quality: float) -> int:
    """Map a ``0.1..1.0`` quality to the Pillow JPEG quality scale."""

    return max(1, min(100, round(quality * 100)))


@dataclasses.dataclass(frozen=True, slots=True)
class RenderConfig:
    """Scale and JPEG quality used for one rasterization generation."""

    scale: float = DEFAULT_SCALE
    quality: float = DEFAULT_QUALITY

    def __post_init__(self) -> None:
        object.__setattr__(self, "scale", _check_range("scale", self.scale, MIN_SCALE, MAX_SCALE))
        object.__setattr__(
            self, "quality", _check_range("quality", self.quality, MIN_QUALITY, MAX_QUALITY)
        )

    @property
    def jpeg_quality(self) -> int:
        return jpeg_quality(self.quality)


@dataclasses.dataclass(frozen=True, slots=True)
class ExportSettings:
    """Options consumed by the export strategies."""

    output_password: str | None = None
    stitch_quality: float = DEFAULT_STITCH_QUALITY

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "stitch_quality",
            _check_range("stitch_quality", self.stitch_quality, MIN_QUALITY, MAX_QUALITY),
        )
        if self.output_password == "":
            object.__setattr__(self, "output_password", None)

    def as_config(self) -> dict[str, Any]:
        return {"output_password": self.output_password, "stitch_quality": self.stitch_quality}


__all__ = [
    "RenderConfig",
    "ExportSettings",
    "jpeg_quality",
    "MIN_SCALE",
    "MAX_SCALE",
    "MIN_QUALITY",
    "MAX_QUALITY",
    "DEFAULT_SCALE",
    "DEFAULT_QUALITY",
    "DEFAULT_STITCH_QUALITY",
]
