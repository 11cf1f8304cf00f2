"""Core interfaces and context objects shared by export strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from ..core.utils import DEFAULT_SOURCE_NAME, base_name
from ..types import ExportResult, RasterPage


@dataclass
class ExportContext:
    """Holds the inputs of one export invocation."""

    pages: Sequence[RasterPage] = ()
    source_name: str = DEFAULT_SOURCE_NAME
    config: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.pages = tuple(self.pages)

    @property
    def base_name(self) -> str:
        return base_name(self.source_name)

    def sorted_pages(self) -> list[RasterPage]:
        return sorted(self.pages, key=lambda page: page.id)


class BaseExporter:
    """Base class for all export strategies."""

    name: str
    suffix: str
    media_type: str = "application/octet-stream"

    def __init__(self, context: ExportContext) -> None:
        self.context = context

    def filename(self) -> str:
        return f"{self.context.base_name}{self.suffix}"

    def run(self) -> ExportResult:  # pragma: no cover - to be implemented by subclasses
        raise NotImplementedError

