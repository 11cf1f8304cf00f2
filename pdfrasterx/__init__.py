"""
pdfrasterx - rasterize PDF pages and repackage a selection of them.

Quick Start:
    >>> from pdfrasterx import PipelineSession, RenderConfig
    >>> session = PipelineSession()
    >>> session.load(open("input.pdf", "rb").read(), name="input.pdf")
    >>> session.rasterize(RenderConfig(scale=2.0, quality=0.85))
    >>> session.apply_range("1-3, 5")
    >>> result = session.export("archive")

Export kinds:
    - archive: ZIP with one JPEG per page
    - stitch: single vertical composite JPEG
    - document: PDF rebuilt from the rasters, optionally encrypted
"""

from __future__ import annotations

from .config import ExportSettings, RenderConfig
from .estimate import estimate_size, format_size
from .exceptions import (
    AuthenticationRejectedError,
    AuthenticationRequiredError,
    ConfigurationError,
    DecodeError,
    ExportError,
    ExportInProgressError,
    PageRenderError,
    PdfRasterError,
    SelectionError,
)
from .exporters import (
    ArchiveExporter,
    DocumentReassembler,
    ExportContext,
    ExportEngine,
    StitchExporter,
    register_exporter,
    registry,
)
from .rasterizer import PageRasterizer, RasterGeneration
from .selection import SelectionModel, SelectionSet, parse_page_selection
from .session import PipelineSession
from .source import OpenOutcome, OpenResult, SourceDocument, SourceLoader
from .types import AuthState, ExportJob, ExportKind, ExportResult, RasterPage

__version__ = "0.1.0"

__all__ = [
    "ArchiveExporter",
    "AuthState",
    "AuthenticationRejectedError",
    "AuthenticationRequiredError",
    "ConfigurationError",
    "DecodeError",
    "DocumentReassembler",
    "ExportContext",
    "ExportEngine",
    "ExportError",
    "ExportInProgressError",
    "ExportJob",
    "ExportKind",
    "ExportResult",
    "ExportSettings",
    "OpenOutcome",
    "OpenResult",
    "PageRasterizer",
    "PageRenderError",
    "PdfRasterError",
    "PipelineSession",
    "RasterGeneration",
    "RasterPage",
    "RenderConfig",
    "SelectionError",
    "SelectionModel",
    "SelectionSet",
    "SourceDocument",
    "SourceLoader",
    "StitchExporter",
    "estimate_size",
    "format_size",
    "parse_page_selection",
    "register_exporter",
    "registry",
    "__version__",
]
