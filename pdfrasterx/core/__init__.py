"""Core helpers for :mod:`pdfrasterx`."""

from __future__ import annotations

from .utils import DEFAULT_SOURCE_NAME, base_name, get_logger, is_pdf_name, progress_percent, resolve_path

__all__ = [
    "DEFAULT_SOURCE_NAME",
    "base_name",
    "get_logger",
    "is_pdf_name",
    "progress_percent",
    "resolve_path",
]
