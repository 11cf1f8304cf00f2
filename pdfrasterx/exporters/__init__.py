"""Export strategies sharing the ordered-pages input contract."""

from __future__ import annotations

from .interfaces import BaseExporter, ExportContext
from .pipeline import ExporterRegistry, register_exporter, registry

# Importing the strategy modules registers them.
from .archive import ArchiveExporter
from .document import DocumentReassembler
from .engine import ExportEngine
from .stitch import StitchExporter

__all__ = [
    "ArchiveExporter",
    "BaseExporter",
    "DocumentReassembler",
    "ExportContext",
    "ExportEngine",
    "ExporterRegistry",
    "StitchExporter",
    "register_exporter",
    "registry",
]
