"""
Type definitions and dataclasses for pdfrasterx.

This module defines the values passed between the loader, the rasterizer,
the selection model and the export strategies.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import Callable, Optional

ProgressCallback = Callable[[int, int], None]

JPEG_EXTENSION = "jpg"
JPEG_MEDIA_TYPE = "image/jpeg"


class AuthState(str, enum.Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    REJECTED = "rejected"


class ExportKind(str, enum.Enum):
    ARCHIVE = "archive"
    STITCH = "stitch"
    DOCUMENT = "document"


@dataclasses.dataclass(frozen=True, slots=True)
class RasterPage:
    """
    One rendered page.

    Attributes:
        id: 1-indexed source page number
        pixel_width: Width of the rendered bitmap
        pixel_height: Height of the rendered bitmap
        encoded_bytes: JPEG encoding of the bitmap
        byte_size: Size accounted for the page in estimates
        scale: Render scale of the generation the page belongs to
        quality: JPEG quality of the generation the page belongs to
    """

    id: int
    pixel_width: int
    pixel_height: int
    encoded_bytes: bytes = dataclasses.field(repr=False)
    byte_size: int
    scale: float
    quality: float
    extension: str = JPEG_EXTENSION
    media_type: str = JPEG_MEDIA_TYPE

    @property
    def is_landscape(self) -> bool:
        return self.pixel_width > self.pixel_height


@dataclasses.dataclass(frozen=True, slots=True)
class ExportJob:
    """A single export request over the selected pages, ordered by id."""

    kind: ExportKind
    pages: tuple[RasterPage, ...]
    output_password: Optional[str] = dataclasses.field(default=None, repr=False)

    @classmethod
    def build(
        cls,
        kind: ExportKind | str,
        pages,
        *,
        output_password: Optional[str] = None,
    ) -> "ExportJob":
        ordered = tuple(sorted(pages, key=lambda page: page.id))
        return cls(ExportKind(kind), ordered, output_password or None)

    @property
    def is_empty(self) -> bool:
        return not self.pages


@dataclasses.dataclass(frozen=True, slots=True)
class ExportResult:
    """Binary artifact and the filename suggested to the persistence layer."""

    data: bytes = dataclasses.field(repr=False)
    filename: str
    media_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.data)


__all__ = [
    "AuthState",
    "ExportKind",
    "ExportJob",
    "ExportResult",
    "ProgressCallback",
    "RasterPage",
    "JPEG_EXTENSION",
    "JPEG_MEDIA_TYPE",
]
