"""Utilities shared by pdfrasterx modules."""

from __future__ import annotations

import logging
import re
from pathlib import Path

DEFAULT_SOURCE_NAME = "document.pdf"

_EXTENSION = re.compile(r"\.[^/.]+$")


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def resolve_path(path: str | Path | None) -> Path:
    if path is None:
        raise ValueError("Path must not be None")
    resolved = Path(path).expanduser().resolve()
    return resolved


def base_name(source_name: str | None) -> str:
    """Return ``source_name`` without its final extension."""

    name = Path(source_name or DEFAULT_SOURCE_NAME).name
    stripped = _EXTENSION.sub("", name)
    return stripped or name


def is_pdf_name(source_name: str | None) -> bool:
    return bool(source_name) and str(source_name).lower().endswith(".pdf")


def progress_percent(current: int, total: int) -> int:
    if total <= 0:
        return 0
    return round(current / total * 100)
