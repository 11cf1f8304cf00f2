"""Projected output size of a page selection."""

from __future__ import annotations

from typing import Iterable

from .types import RasterPage

KIB = 1024
MIB = 1024 * 1024


def format_size(total_bytes: int) -> str:
    """
    Format a byte count the way the selection toolbar shows it.

    Args:
        total_bytes: Summed size in bytes

    Returns:
        ``"0 KB"`` for zero, kilobytes with one decimal below 1 MiB,
        megabytes with two decimals otherwise (e.g. "512.0 KB", "1.00 MB")
    """
    if total_bytes <= 0:
        return "0 KB"
    if total_bytes < MIB:
        return f"{total_bytes / KIB:.1f} KB"
    return f"{total_bytes / MIB:.2f} MB"


def estimate_size(pages: Iterable[RasterPage]) -> str:
    return format_size(sum(page.byte_size for page in pages))


__all__ = ["estimate_size", "format_size"]
