"""Backend abstractions for pdfrasterx."""

from .base import BackendDocument, DocumentBackend
from .pdfium_backend import PdfiumBackend, PdfiumDocument

__all__ = [
    "BackendDocument",
    "DocumentBackend",
    "PdfiumBackend",
    "PdfiumDocument",
]
